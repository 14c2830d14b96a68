"""AWS Secrets Manager lookup for sink credentials.

Typical use is resolving a database password before building a backend config:

    secret = await get_secret("prod/db-logger/postgres")
    if isinstance(secret, dict):
        config = {"type": "relational", "config": {**secret, "service": "api"}}
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import boto3

logger = logging.getLogger(__name__)


async def get_secret(
    secret_id: str, *, client: Any | None = None
) -> str | int | float | bool | dict[str, Any] | list[Any] | None:
    """Fetch a secret value.

    Returns the decoded JSON when `SecretString` holds JSON, the raw string
    otherwise, and `None` when `SecretString` is missing or empty or the
    lookup fails for any reason. Never raises.
    """
    try:
        if client is None:
            client = boto3.client("secretsmanager")
        response = await asyncio.to_thread(client.get_secret_value, SecretId=secret_id)
        secret_string = response.get("SecretString")
        if not secret_string:
            raise ValueError("SecretString is undefined.")
    except Exception as exc:  # noqa: BLE001 - lookup failures are reported as None
        logger.info("Error fetching secret %s: %r", secret_id, exc)
        return None

    try:
        return json.loads(secret_string)
    except ValueError:
        return secret_string
