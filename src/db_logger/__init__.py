"""Pluggable best-effort logging sinks behind a single factory.

`DatabaseLogger.get_instance(config)` builds one sink for the configured
backend (DynamoDB, PostgreSQL, New Relic or the console) the first time it is
called and returns that same sink afterwards. Sink writes are best-effort:
a failed write is reported on the `logging` module and never raised.
"""

from .config import (
    BackendConfig,
    ConsoleBackend,
    ConsoleConfig,
    DynamoConfig,
    NewRelicConfig,
    PostgresConfig,
    RelationalBackend,
    TableBackend,
    TelemetrySaaSBackend,
    load_config,
    parse_backend_config,
)
from .errors import DbLoggerError, SinkConnectionError, UnknownBackendKind, WriteFailure
from .factory import DatabaseLogger, FactoryState, create_sink
from .models import LogRecord, unwrap_detail
from .secrets import get_secret
from .sinks import BestEffortLogSink, ConsoleLogSink, LogSink

__all__ = [
    "BackendConfig",
    "BestEffortLogSink",
    "ConsoleBackend",
    "ConsoleConfig",
    "ConsoleLogSink",
    "DatabaseLogger",
    "DbLoggerError",
    "DynamoConfig",
    "FactoryState",
    "LogRecord",
    "LogSink",
    "NewRelicConfig",
    "PostgresConfig",
    "RelationalBackend",
    "SinkConnectionError",
    "TableBackend",
    "TelemetrySaaSBackend",
    "UnknownBackendKind",
    "WriteFailure",
    "create_sink",
    "get_secret",
    "load_config",
    "parse_backend_config",
    "unwrap_detail",
]
