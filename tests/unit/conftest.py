from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _no_threads_in_unit_tests(monkeypatch: pytest.MonkeyPatch):
    """Run `asyncio.to_thread` inline for unit tests.

    boto3 calls are pushed to a worker thread. In unit tests the fakes are
    instantaneous, so running them inline keeps the threadpool out of the way.
    """

    async def _to_thread(func, /, *args, **kwargs):  # noqa: ANN001, D401
        return func(*args, **kwargs)

    monkeypatch.setattr("db_logger.sinks.dynamo.asyncio.to_thread", _to_thread)
    monkeypatch.setattr("db_logger.secrets.asyncio.to_thread", _to_thread)
    yield
