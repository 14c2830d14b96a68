"""DynamoDB table sink.

Each call issues one `put_item` for a freshly built record. boto3 is
synchronous, so the write runs in a worker thread to keep the event loop free.
The low-level client is used because, unlike resources, it is thread safe.
"""

from __future__ import annotations

import asyncio
import dataclasses
import math
from collections.abc import Mapping
from datetime import timedelta
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.types import TypeSerializer
from pydantic import BaseModel

from ..config import DynamoConfig
from ..models import LogLevel, LogRecord
from .base import BestEffortLogSink

_serializer = TypeSerializer()


def to_dynamo_value(value: Any) -> Any:
    """Convert a payload into values `TypeSerializer` accepts.

    - `None` entries in maps are dropped (the attribute is omitted). `None`
      inside lists is kept as a NULL element so positions are preserved.
    - `str`, `bool`, `int`, `Decimal`, `bytes` (empty blobs included) and
      homogeneous string/number/binary sets pass through unchanged.
    - Finite floats become `Decimal`; NaN, infinities and non-finite decimals
      are stored as strings.
    - Pydantic models and dataclasses are stored as maps, tuples as lists,
      empty or mixed sets as lists; anything else is stringified.
    """
    if value is None or isinstance(value, (str, bool, int, bytes)):
        return value
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else str(value)
    if isinstance(value, Decimal):
        return value if value.is_finite() else str(value)
    if isinstance(value, BaseModel):
        return to_dynamo_value(value.model_dump())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_dynamo_value(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(k): to_dynamo_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [to_dynamo_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return _to_dynamo_set(value)
    return str(value)


def _to_dynamo_set(value: set[Any] | frozenset[Any]) -> Any:
    items = [to_dynamo_value(v) for v in value]
    if items and all(isinstance(v, str) for v in items):
        return set(items)
    if items and all(isinstance(v, bytes) for v in items):
        return set(items)
    if items and all(isinstance(v, (int, Decimal)) and not isinstance(v, bool) for v in items):
        return set(items)
    # DynamoDB has no empty or mixed-type sets.
    return items


class DynamoLogSink(BestEffortLogSink):
    """Writes one item per call to a DynamoDB table."""

    backend = "dynamodb"

    def __init__(self, config: DynamoConfig, *, client: Any | None = None) -> None:
        """Bind to the configured table.

        Args:
            config: Region, table name and service for the records.
            client: Pre-built `boto3` DynamoDB client (mainly for tests).
        """
        self._config = config
        self._retention = timedelta(days=config.retention_days)
        if client is None:
            client = boto3.client("dynamodb", region_name=config.region)
        self._client = client

    @property
    def table_name(self) -> str:
        return self._config.table_name

    def build_item(self, record: LogRecord) -> dict[str, Any]:
        """Map a record onto the item stored in the table (plain Python values)."""
        item = {
            "id": record.id,
            "level": record.level,
            "created_at": record.created_at,
            "service": record.service,
            "message": record.message,
            "info": to_dynamo_value(record.info),
            "ttl": record.ttl,
        }
        return {k: v for k, v in item.items() if v is not None}

    async def _write(self, level: LogLevel, message: str, info: Any) -> None:
        record = LogRecord.create(
            level,
            message,
            info,
            service=self._config.service,
            retention=self._retention,
        )
        item = {k: _serializer.serialize(v) for k, v in self.build_item(record).items()}
        await asyncio.to_thread(self._client.put_item, TableName=self._config.table_name, Item=item)
