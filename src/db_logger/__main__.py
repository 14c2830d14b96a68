"""Demo entrypoint: write one entry of each level to the configured backend.

Run with `python -m db_logger` after setting `DB_LOGGER_TYPE` (and the
backend's variables) in the environment or a local `.env` file. It is a manual
smoke test, not part of the library API.
"""

from __future__ import annotations

import asyncio
import logging
import time

from .config import load_config
from .factory import DatabaseLogger


async def run_demo() -> None:
    """Obtain a sink from env config and write a `log` and an `error` entry."""
    config = load_config()
    factory = DatabaseLogger()
    try:
        sink = await factory.get_instance(config)
        started = int(time.time() * 1000)
        await sink.log("db-logger demo", {"detail": {"started_at": started}})
        await sink.error("db-logger demo error", {"reason": "demo", "started_at": started})
    finally:
        await factory.aclose()


def main() -> None:
    """CLI entrypoint for `python -m db_logger`."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
