from __future__ import annotations

import logging
from typing import Any

import pytest

from db_logger.secrets import get_secret


class _FakeSecretsClient:
    def __init__(self, response: dict[str, Any] | None = None, *, error: Exception | None = None) -> None:
        self._response = response or {}
        self._error = error
        self.calls: list[str] = []

    def get_secret_value(self, *, SecretId: str) -> dict[str, Any]:  # noqa: N803 - boto3 signature
        self.calls.append(SecretId)
        if self._error is not None:
            raise self._error
        return self._response


@pytest.mark.asyncio
async def test_json_secret_is_parsed() -> None:
    client = _FakeSecretsClient({"SecretString": '{"user": "u", "password": "p"}'})

    secret = await get_secret("db/creds", client=client)

    assert secret == {"user": "u", "password": "p"}
    assert client.calls == ["db/creds"]


@pytest.mark.asyncio
async def test_plain_secret_is_returned_as_string() -> None:
    client = _FakeSecretsClient({"SecretString": "hunter2"})
    assert await get_secret("api/key", client=client) == "hunter2"


@pytest.mark.asyncio
async def test_missing_secret_string_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    client = _FakeSecretsClient({"SecretBinary": b"\x00"})

    with caplog.at_level(logging.INFO, logger="db_logger"):
        assert await get_secret("bin", client=client) is None

    assert any("SecretString is undefined" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_client_error_returns_none() -> None:
    client = _FakeSecretsClient(error=RuntimeError("AccessDeniedException"))
    assert await get_secret("nope", client=client) is None


@pytest.mark.asyncio
async def test_default_client_failure_returns_none(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_client(service_name: str) -> Any:
        raise RuntimeError("NoRegionError")

    monkeypatch.setattr("db_logger.secrets.boto3.client", broken_client)
    assert await get_secret("x") is None


@pytest.mark.asyncio
async def test_empty_secret_string_returns_none() -> None:
    client = _FakeSecretsClient({"SecretString": ""})
    assert await get_secret("blank", client=client) is None


@pytest.mark.asyncio
async def test_json_scalar_secret_is_parsed() -> None:
    client = _FakeSecretsClient({"SecretString": "5432"})
    assert await get_secret("port", client=client) == 5432
