from __future__ import annotations

import logging
import os
from types import SimpleNamespace
from typing import Any

import pytest

from db_logger.config import NewRelicConfig
from db_logger.sinks.new_relic import NewRelicLogSink


class _FakeAgent:
    def __init__(self, *, fail_events: bool = False) -> None:
        self.settings = SimpleNamespace(app_name=None, license_key=None)
        self.initialized = 0
        self.registered: list[dict[str, Any]] = []
        self.events: list[tuple[str, dict[str, Any], Any]] = []
        self._fail_events = fail_events
        self.application = object()

    def global_settings(self) -> SimpleNamespace:
        return self.settings

    def initialize(self) -> None:
        self.initialized += 1

    def register_application(self, *, name: str, timeout: float) -> object:
        self.registered.append({"name": name, "timeout": timeout})
        return self.application

    def record_custom_event(self, event_type: str, params: dict[str, Any], application: Any = None) -> None:
        if self._fail_events:
            raise RuntimeError("agent not active")
        self.events.append((event_type, params, application))


def _config() -> NewRelicConfig:
    return NewRelicConfig(license_key="lk", app_name="svc")


def test_construction_configures_agent_without_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NEW_RELIC_APP_NAME", raising=False)
    monkeypatch.delenv("NEW_RELIC_LICENSE_KEY", raising=False)
    agent = _FakeAgent()

    NewRelicLogSink(_config(), agent=agent)

    assert agent.settings.app_name == "svc"
    assert agent.settings.license_key == "lk"
    assert agent.initialized == 1
    assert agent.registered == [{"name": "svc", "timeout": 0.0}]
    assert "NEW_RELIC_APP_NAME" not in os.environ
    assert "NEW_RELIC_LICENSE_KEY" not in os.environ


@pytest.mark.asyncio
async def test_log_and_error_record_custom_events() -> None:
    agent = _FakeAgent()
    sink = NewRelicLogSink(_config(), agent=agent)

    await sink.log("m", {"detail": {"a": 1}})
    await sink.error("e")

    assert len(agent.events) == 2
    event_type, params, application = agent.events[0]
    assert event_type == "LogRecord"
    assert application is agent.application
    assert params["level"] == "log"
    assert params["message"] == "m"
    assert params["service"] == "svc"
    assert params["info"] == '{"a":1}'

    _, error_params, _ = agent.events[1]
    assert error_params["level"] == "error"
    assert "info" not in error_params


@pytest.mark.asyncio
async def test_event_failure_is_swallowed(caplog: pytest.LogCaptureFixture) -> None:
    sink = NewRelicLogSink(_config(), agent=_FakeAgent(fail_events=True))

    with caplog.at_level(logging.ERROR, logger="db_logger"):
        await sink.error("e", {"a": 1})

    assert len(caplog.records) == 1
    assert "newrelic" in caplog.records[0].getMessage()


@pytest.mark.asyncio
async def test_error_unwraps_detail_payload() -> None:
    agent = _FakeAgent()
    sink = NewRelicLogSink(_config(), agent=agent)

    await sink.error("m", {"detail": {"a": 1}})

    _, params, _ = agent.events[0]
    assert params["level"] == "error"
    assert params["info"] == '{"a":1}'
