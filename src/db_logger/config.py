"""Configuration loading and validation.

This module is responsible for:

- Describing each backend's connection parameters as Pydantic models.
- Parsing the tagged backend config handed to `DatabaseLogger.get_instance`.
- Loading `.env` into the process environment (without overriding existing vars)
  and building a backend config from environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Annotated, Any, Literal, TypeVar, Union

import dotenv
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .errors import UnknownBackendKind

_T = TypeVar("_T", int, float)

BackendKind = Literal["table", "relational", "telemetrySaaS", "console"]

BACKEND_KINDS: frozenset[str] = frozenset({"table", "relational", "telemetrySaaS", "console"})

# Tags used by earlier releases of the package.
_TAG_ALIASES: dict[str, str] = {
    "dynamo": "table",
    "postgres": "relational",
    "newrelic": "telemetrySaaS",
}


def _get_required_env(name: str) -> str:
    """Read a required env var or raise a helpful error."""
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"{name} is required. Please set it in your .env file.")
    if value.startswith("your_") and value.endswith("_here"):
        raise ValueError(f"{name} is required. Please replace the placeholder value in your .env file.")
    return value


def _get_optional_env(name: str) -> str | None:
    """Read an optional env var, treating blank values as unset."""
    value = os.getenv(name, "").strip()
    return value or None


def _get_env_number(name: str, default: _T, cast: type[_T]) -> _T:
    """Read an int/float env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a {cast.__name__}. Got: {raw!r}") from exc


class _Config(BaseModel):
    # Accept both `tableName` and `table_name` style keys.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")


class DynamoConfig(_Config):
    """Connection parameters for the DynamoDB table sink."""

    region: str = Field(..., description="AWS region hosting the table")
    table_name: str = Field(
        ...,
        description="DynamoDB table receiving log items",
        validation_alias=AliasChoices("table_name", "tableName", "dbname"),
    )
    service: str = Field(..., description="Service name stamped on every record")
    retention_days: int = Field(default=15, gt=0, description="Days until the item's ttl expires")


class PostgresConfig(_Config):
    """Connection parameters for the PostgreSQL sink.

    Either `connection_string` or the discrete `host`/`user`/`password` fields
    must be provided. `port` and `dbname` fall back to the server defaults.
    """

    connection_string: str | None = Field(default=None, repr=False, description="libpq style DSN")
    host: str | None = Field(default=None, description="Database host")
    user: str | None = Field(default=None, description="Database user")
    password: str | None = Field(default=None, repr=False, description="Database password")
    port: int = Field(default=5432, description="Database port")
    dbname: str = Field(default="postgres", description="Database name")
    service: str = Field(..., description="Service name stamped on every row")

    # Pool tuning; timeouts are left to the driver.
    min_size: int = Field(default=1, ge=0, description="Connections opened when the pool is created")
    max_size: int = Field(default=10, gt=0, description="Upper bound on pooled connections")
    command_timeout: float | None = Field(default=None, gt=0, description="Per-statement timeout (seconds)")

    @field_validator("port", mode="before")
    def default_port(cls, v: Any) -> Any:
        """Treat a missing or zero port as the PostgreSQL default."""
        if v in (None, "", 0):
            return 5432
        return v

    @field_validator("dbname", mode="before")
    def default_dbname(cls, v: Any) -> Any:
        """Treat a blank database name as `postgres`."""
        if v in (None, ""):
            return "postgres"
        return v

    @model_validator(mode="after")
    def require_target(self) -> "PostgresConfig":
        if not self.connection_string and not self.host:
            raise ValueError("PostgresConfig requires either connection_string or host.")
        if self.min_size > self.max_size:
            raise ValueError(f"min_size ({self.min_size}) must not exceed max_size ({self.max_size}).")
        return self


class NewRelicConfig(_Config):
    """Settings handed to the New Relic agent."""

    license_key: str = Field(..., repr=False, description="New Relic license key")
    app_name: str = Field(..., description="Application name reported to New Relic")
    event_type: str = Field(default="LogRecord", description="Custom event type for log entries")
    startup_timeout: float = Field(default=0.0, ge=0, description="Seconds to wait for agent registration")

    @field_validator("license_key")
    def validate_license_key(cls, v: str) -> str:
        """Validate the license key is set (not empty/placeholder)."""
        if not v or v == "your_new_relic_license_key_here":
            raise ValueError("NEW_RELIC_LICENSE_KEY is required. Please set it in your .env file.")
        return v


class ConsoleConfig(_Config):
    """Settings for the console passthrough sink."""

    service: str = Field(default="", description="Service name (informational only)")


class _Backend(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class TableBackend(_Backend):
    type: Literal["table"] = "table"
    config: DynamoConfig


class RelationalBackend(_Backend):
    type: Literal["relational"] = "relational"
    config: PostgresConfig


class TelemetrySaaSBackend(_Backend):
    type: Literal["telemetrySaaS"] = "telemetrySaaS"
    config: NewRelicConfig


class ConsoleBackend(_Backend):
    type: Literal["console"] = "console"
    config: ConsoleConfig = Field(default_factory=ConsoleConfig)


BackendConfig = Annotated[
    Union[TableBackend, RelationalBackend, TelemetrySaaSBackend, ConsoleBackend],
    Field(discriminator="type"),
]

_backend_adapter: TypeAdapter[BackendConfig] = TypeAdapter(BackendConfig)

_BACKEND_MODELS = (TableBackend, RelationalBackend, TelemetrySaaSBackend, ConsoleBackend)


def normalize_kind(kind: object) -> str:
    """Map a raw backend tag (including legacy aliases) to its canonical name.

    Raises `UnknownBackendKind` when the tag is missing or not recognized.
    """
    if not isinstance(kind, str):
        raise UnknownBackendKind(kind)
    canonical = _TAG_ALIASES.get(kind, kind)
    if canonical not in BACKEND_KINDS:
        raise UnknownBackendKind(kind)
    return canonical


def parse_backend_config(raw: BackendConfig | Mapping[str, Any]) -> BackendConfig:
    """Validate a tagged backend config.

    Accepts an already-built backend model or a mapping such as
    `{"type": "table", "config": {"region": ..., "tableName": ..., "service": ...}}`.

    Raises:
    - `UnknownBackendKind` when the `type` tag is missing or unknown
    - `pydantic.ValidationError` when the tag is known but `config` is invalid
    """
    if isinstance(raw, _BACKEND_MODELS):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError(f"Backend config must be a mapping or backend model. Got: {type(raw).__name__}")

    kind = normalize_kind(raw.get("type"))
    data = dict(raw)
    data["type"] = kind
    data.setdefault("config", {})
    return _backend_adapter.validate_python(data)


def load_config() -> BackendConfig:
    """Build a backend config from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - `DB_LOGGER_TYPE` selects the backend and defaults to `console`.
    - Raises `ValueError` with actionable messages when required configuration is
      missing or still contains placeholder values.
    """
    dotenv.load_dotenv()

    kind = normalize_kind(os.getenv("DB_LOGGER_TYPE", "").strip() or "console")
    service = os.getenv("DB_LOGGER_SERVICE", "").strip()

    if kind == "table":
        return TableBackend(
            config=DynamoConfig(
                region=_get_required_env("DB_LOGGER_DYNAMO_REGION"),
                table_name=_get_required_env("DB_LOGGER_DYNAMO_TABLE"),
                service=_get_required_env("DB_LOGGER_SERVICE"),
                retention_days=_get_env_number("DB_LOGGER_DYNAMO_RETENTION_DAYS", 15, int),
            )
        )

    if kind == "relational":
        connection_string = _get_optional_env("DB_LOGGER_PG_CONNECTION_STRING")
        if connection_string is None:
            host = _get_required_env("DB_LOGGER_PG_HOST")
            user = _get_required_env("DB_LOGGER_PG_USER")
            password = _get_required_env("DB_LOGGER_PG_PASSWORD")
        else:
            host = _get_optional_env("DB_LOGGER_PG_HOST")
            user = _get_optional_env("DB_LOGGER_PG_USER")
            password = _get_optional_env("DB_LOGGER_PG_PASSWORD")
        return RelationalBackend(
            config=PostgresConfig(
                connection_string=connection_string,
                host=host,
                user=user,
                password=password,
                port=_get_env_number("DB_LOGGER_PG_PORT", 5432, int),
                dbname=_get_optional_env("DB_LOGGER_PG_DBNAME") or "postgres",
                service=_get_required_env("DB_LOGGER_SERVICE"),
            )
        )

    if kind == "telemetrySaaS":
        return TelemetrySaaSBackend(
            config=NewRelicConfig(
                license_key=_get_required_env("NEW_RELIC_LICENSE_KEY"),
                app_name=_get_required_env("NEW_RELIC_APP_NAME"),
            )
        )

    return ConsoleBackend(config=ConsoleConfig(service=service))
