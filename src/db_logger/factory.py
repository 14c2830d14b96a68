"""Factory that lazily builds and memoizes a single log sink.

A `DatabaseLogger` is owned by the caller: create one at startup and pass it
(or the sink it returns) to whatever needs to log. The first successful
`get_instance` call decides the backend; later calls get the same sink back
and their config is ignored.

Example:
    factory = DatabaseLogger()
    sink = await factory.get_instance(
        {"type": "table", "config": {"region": "us-east-1", "tableName": "logs", "service": "api"}}
    )
    await sink.log("user created", {"detail": {"user_id": 1}})
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .config import BackendConfig, parse_backend_config
from .errors import UnknownBackendKind
from .sinks.base import LogSink

logger = logging.getLogger(__name__)


class FactoryState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    CLOSED = "closed"


async def create_sink(config: BackendConfig | Mapping[str, Any]) -> LogSink:
    """Build a ready-to-use sink for the given backend config (no memoization).

    Raises:
    - `UnknownBackendKind` for an unrecognized `type` tag
    - `pydantic.ValidationError` for invalid backend parameters
    - `SinkConnectionError` when the relational backend cannot connect
    """
    backend = parse_backend_config(config)
    logger.info("Creating %s log sink", backend.type)

    if backend.type == "table":
        from .sinks.dynamo import DynamoLogSink

        return DynamoLogSink(backend.config)

    elif backend.type == "relational":
        from .sinks.postgres import PostgresLogSink

        sink = PostgresLogSink(backend.config)
        await sink.connect()
        return sink

    elif backend.type == "telemetrySaaS":
        from .sinks.new_relic import NewRelicLogSink

        return NewRelicLogSink(backend.config)

    elif backend.type == "console":
        from .sinks.console import ConsoleLogSink

        return ConsoleLogSink(service=backend.config.service)

    else:
        raise UnknownBackendKind(backend.type)


class DatabaseLogger:
    """Selects a backend on first use and hands out the same sink afterwards."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._sink: LogSink | None = None
        self._state = FactoryState.UNINITIALIZED

    @property
    def state(self) -> FactoryState:
        return self._state

    @property
    def sink(self) -> LogSink | None:
        """The memoized sink, or `None` before initialization succeeds."""
        return self._sink

    async def get_instance(self, config: BackendConfig | Mapping[str, Any]) -> LogSink:
        """Return the sink, building it from `config` on the first call.

        Concurrent first callers are serialized on a lock so only one backend
        is ever constructed. If construction fails the factory stays
        uninitialized, the error propagates, and a later call may retry.
        """
        if self._state is FactoryState.READY and self._sink is not None:
            return self._sink

        async with self._lock:
            if self._state is FactoryState.CLOSED:
                raise RuntimeError("DatabaseLogger is closed.")
            if self._sink is not None:
                return self._sink

            self._state = FactoryState.INITIALIZING
            try:
                sink = await create_sink(config)
            except BaseException:
                self._state = FactoryState.UNINITIALIZED
                raise

            self._sink = sink
            self._state = FactoryState.READY
            return sink

    async def aclose(self) -> None:
        """Close the held sink. Safe to call multiple times."""
        async with self._lock:
            if self._state is FactoryState.CLOSED:
                return
            sink, self._sink = self._sink, None
            self._state = FactoryState.CLOSED
        if sink is not None:
            await sink.aclose()
