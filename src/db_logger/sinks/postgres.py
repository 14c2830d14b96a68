"""PostgreSQL sink backed by an `asyncpg` connection pool.

The pool is created by `connect()`, not by the constructor. Every write
borrows one connection for a single INSERT into the `logs` table and always
hands it back, whether or not the statement succeeded.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from ..config import PostgresConfig
from ..errors import SinkConnectionError
from ..models import LogLevel, LogRecord
from .base import BestEffortLogSink

logger = logging.getLogger(__name__)

INSERT_LOG_SQL = "INSERT INTO logs(level, message, metadata, service) VALUES($1, $2, $3, $4)"


class PostgresLogSink(BestEffortLogSink):
    """Writes one row per call to the `logs` table."""

    backend = "postgres"

    def __init__(self, config: PostgresConfig) -> None:
        """Store the config; no connection is opened until `connect()`."""
        self._config = config
        self._pool: asyncpg.Pool | None = None

    @property
    def pool(self) -> asyncpg.Pool | None:
        return self._pool

    def _pool_kwargs(self) -> dict[str, Any]:
        """Translate the config into `asyncpg.create_pool` arguments."""
        cfg = self._config
        kwargs: dict[str, Any] = {
            "min_size": cfg.min_size,
            "max_size": cfg.max_size,
        }
        if cfg.command_timeout is not None:
            kwargs["command_timeout"] = cfg.command_timeout
        if cfg.connection_string:
            kwargs["dsn"] = cfg.connection_string
        else:
            kwargs.update(
                host=cfg.host,
                user=cfg.user,
                password=cfg.password,
                port=cfg.port,
                database=cfg.dbname,
            )
        return kwargs

    async def connect(self) -> None:
        """Create the pool and probe it with one acquire/release round trip.

        Raises:
        - `SinkConnectionError` if the pool cannot be created or the probe fails
        """
        pool: asyncpg.Pool | None = None
        try:
            pool = await asyncpg.create_pool(**self._pool_kwargs())
            conn = await pool.acquire()
            await pool.release(conn)
        except Exception as exc:
            logger.error("Error connecting to Postgres: %r", exc)
            if pool is not None:
                pool.terminate()
            raise SinkConnectionError(f"Could not connect to Postgres: {exc}") from exc

        self._pool = pool
        logger.info("Postgres connected")

    async def _write(self, level: LogLevel, message: str, info: Any) -> None:
        if self._pool is None:
            raise SinkConnectionError("Postgres sink is not connected; call connect() first.")

        record = LogRecord.create(level, message, info, service=self._config.service)
        conn = await self._pool.acquire()
        try:
            await conn.execute(INSERT_LOG_SQL, record.level, record.message, record.info_json(), record.service)
        finally:
            await self._pool.release(conn)

    async def aclose(self) -> None:
        """Close the pool (waits for borrowed connections to be released)."""
        pool, self._pool = self._pool, None
        if pool is not None:
            await pool.close()
