"""Log record model shared by the persisting sinks.

A record is built fresh for every `log`/`error` call, handed to exactly one
backend write, and then discarded.
"""

from __future__ import annotations

import json
import math
import time
import uuid
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["log", "error"]


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def unwrap_detail(info: Any) -> Any:
    """Return the payload that should be persisted for `info`.

    Event-shaped payloads (`{"detail": {...}, ...}`) are reduced to their
    `detail` entry when it is truthy. Every other value is returned unchanged.
    Applied to both `log` and `error` on every persisting sink.
    """
    if isinstance(info, Mapping):
        detail = info.get("detail")
        if detail:
            return detail
    return info


def dumps_info(info: Any) -> str | None:
    """Serialize a payload as compact JSON (`None` stays `None`)."""
    if info is None:
        return None
    return json.dumps(info, separators=(",", ":"), default=str)


class LogRecord(BaseModel):
    """A single structured log entry."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    level: LogLevel
    created_at: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    service: str
    message: str
    info: Any = None

    # Epoch seconds after which the backend may expire the record.
    ttl: int | None = None

    @classmethod
    def create(
        cls,
        level: LogLevel,
        message: str,
        info: Any = None,
        *,
        service: str,
        retention: timedelta | None = None,
    ) -> "LogRecord":
        """Build a record stamped with the current time and a fresh id."""
        created_at = now_ms()
        ttl = None
        if retention is not None:
            ttl = math.floor(created_at / 1000) + int(retention.total_seconds())
        return cls(level=level, created_at=created_at, service=service, message=message, info=info, ttl=ttl)

    def info_json(self) -> str | None:
        """Return `info` as compact JSON, or `None` when there is no payload."""
        return dumps_info(self.info)
