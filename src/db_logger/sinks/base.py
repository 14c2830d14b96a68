"""Sink contract and the best-effort base shared by persisting backends."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol

from ..errors import WriteFailure
from ..models import LogLevel, unwrap_detail

logger = logging.getLogger(__name__)


class LogSink(Protocol):
    """A destination that accepts log entries.

    `log` and `error` complete once the single backend write has finished (or
    failed); write failures never propagate to the caller.
    """

    async def log(self, message: str, info: Any = None) -> None:
        """Write an entry tagged `level="log"`."""

    async def error(self, message: str, info: Any = None) -> None:
        """Write an entry tagged `level="error"`."""

    async def aclose(self) -> None:
        """Release any underlying resources."""


class BestEffortLogSink(ABC):
    """Base for sinks whose writes must never crash the caller.

    Subclasses implement `_write`; any exception it raises is reported as one
    diagnostic line on this module's logger and otherwise discarded.
    """

    backend: str = "backend"

    async def log(self, message: str, info: Any = None) -> None:
        await self._safe_write("log", message, info)

    async def error(self, message: str, info: Any = None) -> None:
        await self._safe_write("error", message, info)

    async def aclose(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""

    async def _safe_write(self, level: LogLevel, message: str, info: Any) -> None:
        try:
            await self._write(level, message, unwrap_detail(info))
        except Exception as exc:  # noqa: BLE001 - logging must not crash the caller
            failure = WriteFailure(backend=self.backend, level=level, cause=exc)
            logger.error("%s", failure)

    @abstractmethod
    async def _write(self, level: LogLevel, message: str, info: Any) -> None:
        """Perform the single backend write for one entry."""
