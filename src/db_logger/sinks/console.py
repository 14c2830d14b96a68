"""Console passthrough sink."""

from __future__ import annotations

import sys
from typing import Any


class ConsoleLogSink:
    """Prints entries to stdout (`log`) or stderr (`error`) unchanged."""

    def __init__(self, service: str = "") -> None:
        self.service = service

    async def log(self, message: str, info: Any = None) -> None:
        if info is None:
            print(message)
        else:
            print(message, info)

    async def error(self, message: str, info: Any = None) -> None:
        if info is None:
            print(message, file=sys.stderr)
        else:
            print(message, info, file=sys.stderr)

    async def aclose(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""
