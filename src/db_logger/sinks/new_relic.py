"""New Relic sink: log entries become custom events.

The agent is configured explicitly from `NewRelicConfig` rather than through
`NEW_RELIC_*` environment variables, so the order in which the agent module is
imported does not matter.
"""

from __future__ import annotations

import logging
from typing import Any

import newrelic.agent

from ..config import NewRelicConfig
from ..models import LogLevel, LogRecord
from .base import BestEffortLogSink

logger = logging.getLogger(__name__)


class NewRelicLogSink(BestEffortLogSink):
    """Records one New Relic custom event per call."""

    backend = "newrelic"

    def __init__(self, config: NewRelicConfig, *, agent: Any = None) -> None:
        """Configure and register the agent application.

        Args:
            config: License key, app name and event type.
            agent: Object exposing the `newrelic.agent` API (mainly for tests).
        """
        self._config = config
        self._agent = agent if agent is not None else newrelic.agent

        settings = self._agent.global_settings()
        settings.app_name = config.app_name
        settings.license_key = config.license_key
        self._agent.initialize()
        self._application = self._agent.register_application(
            name=config.app_name,
            timeout=config.startup_timeout,
        )

    def build_event(self, record: LogRecord) -> dict[str, Any]:
        """Flatten a record into custom event attributes (primitives only)."""
        params: dict[str, Any] = {
            "id": record.id,
            "level": record.level,
            "created_at": record.created_at,
            "service": record.service,
            "message": record.message,
        }
        info = record.info_json()
        if info is not None:
            params["info"] = info
        return params

    async def _write(self, level: LogLevel, message: str, info: Any) -> None:
        record = LogRecord.create(level, message, info, service=self._config.app_name)
        logger.debug("NewRelicLogSink %s %s %s", level, message, info)
        self._agent.record_custom_event(
            self._config.event_type,
            self.build_event(record),
            application=self._application,
        )
