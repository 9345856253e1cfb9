"""Routing data store configuration."""

from __future__ import annotations

import re
from typing import Any, Literal
from urllib.parse import SplitResult, urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

from handoffkit.errors import InvalidConfigurationError

_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]*$")

_SCHEMES: dict[str, Literal["memory", "postgres"]] = {
    "memory": "memory",
    "postgres": "postgres",
    "postgresql": "postgres",
}


class RoutingTableNames(BaseModel):
    """Physical names of the five routing tables."""

    bot_instances: str = "BotInstances"
    users: str = "Users"
    aggregation_channels: str = "AggregationChannels"
    connection_requests: str = "ConnectionRequests"
    connections: str = "Connections"

    @field_validator("*")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not value or not _IDENTIFIER.match(value):
            msg = f"Table name {value!r} must be a non-empty identifier [A-Za-z0-9_]."
            raise ValueError(msg)
        return value


class RoutingStoreConfig(BaseModel):
    """Where and how the routing data store keeps its tables.

    ``connection_string`` selects the backing medium by scheme::

        RoutingStoreConfig(connection_string="memory://local")
        RoutingStoreConfig(connection_string="postgresql://bot:pw@db/handoff")

    ``partition_key`` is shared by every row of every table; use a distinct
    value (or ``table_prefix``) to isolate deployments or test runs that
    share one medium.
    """

    model_config = ConfigDict(hide_input_in_errors=True)

    connection_string: SecretStr
    partition_key: str = "botHandOff"
    table_prefix: str = ""
    table_names: RoutingTableNames = Field(default_factory=RoutingTableNames)
    pool_min_size: int = Field(default=1, ge=0)
    pool_max_size: int = Field(default=10, ge=1)

    @field_validator("connection_string")
    @classmethod
    def _validate_connection_string(cls, value: SecretStr) -> SecretStr:
        raw = value.get_secret_value().strip()
        if not raw:
            msg = "The connection string cannot be empty."
            raise ValueError(msg)
        parts = urlsplit(raw)
        if parts.scheme.lower() not in _SCHEMES:
            supported = ", ".join(f"{s}://" for s in _SCHEMES)
            msg = f"Unsupported connection string; expected one of {supported}."
            raise ValueError(msg)
        if _SCHEMES[parts.scheme.lower()] == "postgres" and not (
            parts.netloc or "host=" in parts.query
        ):
            msg = "PostgreSQL connection string has no host."
            raise ValueError(msg)
        return SecretStr(raw)

    @field_validator("partition_key")
    @classmethod
    def _validate_partition_key(cls, value: str) -> str:
        if not value:
            msg = "partition_key cannot be empty."
            raise ValueError(msg)
        return value

    @field_validator("table_prefix")
    @classmethod
    def _validate_table_prefix(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            msg = f"table_prefix {value!r} may only contain [A-Za-z0-9_]."
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _validate_pool_size(self) -> RoutingStoreConfig:
        if self.pool_min_size > self.pool_max_size:
            msg = "pool_min_size cannot exceed pool_max_size."
            raise ValueError(msg)
        return self

    @classmethod
    def from_connection_string(
        cls, connection_string: str | None, **options: Any
    ) -> RoutingStoreConfig:
        """Build a config, raising ``InvalidConfigurationError`` if it is invalid."""
        try:
            return cls.model_validate({"connection_string": connection_string, **options})
        except ValidationError as exc:
            raise InvalidConfigurationError(
                f"Invalid routing store configuration: {exc}"
            ) from exc

    @property
    def backend(self) -> Literal["memory", "postgres"]:
        return _SCHEMES[self._parts.scheme.lower()]

    @property
    def memory_name(self) -> str:
        """Name of the shared in-memory service for ``memory://`` descriptors."""
        return self._parts.netloc or self._parts.path.strip("/") or "default"

    def table_name(self, table: str) -> str:
        """Physical name of *table* (a :class:`RoutingTableNames` field), prefixed."""
        return self.table_prefix + getattr(self.table_names, table)

    @property
    def _parts(self) -> SplitResult:
        return urlsplit(self.connection_string.get_secret_value())
