"""Exceptions raised by the logger factory and its sinks."""

from __future__ import annotations


class DbLoggerError(Exception):
    """Base class for all db-logger errors."""


class UnknownBackendKind(DbLoggerError, ValueError):
    """The backend config carries a tag no sink is registered for."""

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unknown logger backend type: {kind!r}")


class SinkConnectionError(DbLoggerError, ConnectionError):
    """A sink could not reach its backend while initializing."""


class WriteFailure(DbLoggerError, RuntimeError):
    """A single write to a backend failed.

    Sinks never raise this to callers of `log`/`error`; it only wraps the
    underlying exception for the diagnostic line.
    """

    def __init__(self, *, backend: str, level: str, cause: BaseException) -> None:
        self.backend = backend
        self.level = level
        self.cause = cause
        super().__init__(f"Error logging {level} message to {backend}: {cause!r}")
