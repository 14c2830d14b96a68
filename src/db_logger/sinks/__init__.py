"""Sink implementations (log destinations).

Backends are imported lazily by the factory so that only the client library of
the selected backend has to be importable:

- DynamoLogSink: one DynamoDB item per call (`boto3`)
- PostgresLogSink: one row in `logs` per call (`asyncpg` pool)
- NewRelicLogSink: one New Relic custom event per call (`newrelic` agent)
- ConsoleLogSink: stdout/stderr passthrough
"""

from .base import BestEffortLogSink, LogSink
from .console import ConsoleLogSink

__all__ = [
    "BestEffortLogSink",
    "ConsoleLogSink",
    "LogSink",
]
