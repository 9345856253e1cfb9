"""Routing data store over five key-value routing tables."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, TypeVar

from pydantic import BaseModel

from handoffkit.errors import ProvisioningError
from handoffkit.models.routing import Connection, ConnectionRequest, ConversationReference
from handoffkit.store.base import RoutingDataStore
from handoffkit.store.codec import decode, encode
from handoffkit.store.config import RoutingStoreConfig
from handoffkit.store.keys import (
    connection_key,
    connection_request_key,
    conversation_reference_key,
)
from handoffkit.store.memory import InMemoryRoutingTable, InMemoryTableService
from handoffkit.store.table import RoutingTable

logger = logging.getLogger("handoffkit.store")

EntityT = TypeVar("EntityT", bound=BaseModel)


class TableRoutingDataStore(RoutingDataStore):
    """Routing data store keeping each entity kind in its own table.

    Build it from a connection string or a full :class:`RoutingStoreConfig`::

        store = TableRoutingDataStore("postgresql://bot:pw@db/handoff")
        await store.wait_provisioned()

    Tables are provisioned in the background: when constructed inside a
    running event loop the provisioning task starts immediately, otherwise it
    starts on the first operation, :meth:`wait_provisioned` or ``async with``. Until it
    finishes, reads may raise :class:`~handoffkit.errors.TableNotFoundError`
    and writes may return ``False``; both are safe to retry. Provisioning
    failures are logged and collected in :attr:`provisioning_errors`.
    """

    def __init__(
        self,
        connection_string: str | None = None,
        *,
        config: RoutingStoreConfig | None = None,
        pool: Any = None,
    ) -> None:
        if config is None:
            config = RoutingStoreConfig.from_connection_string(connection_string)
        self._config = config
        self._postgres: Any = None

        self._bot_instances = self._create_table("bot_instances", pool)
        self._users = self._create_table("users", pool)
        self._aggregation_channels = self._create_table("aggregation_channels", pool)
        self._connection_requests = self._create_table("connection_requests", pool)
        self._connections = self._create_table("connections", pool)

        self._provisioning: asyncio.Task[None] | None = None
        self._provisioning_errors: list[ProvisioningError] = []
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; table provisioning deferred")
        else:
            self._start_provisioning()

    @classmethod
    def from_config(cls, config: RoutingStoreConfig, *, pool: Any = None) -> TableRoutingDataStore:
        return cls(config=config, pool=pool)

    @property
    def config(self) -> RoutingStoreConfig:
        return self._config

    @property
    def tables(self) -> tuple[RoutingTable, ...]:
        return (
            self._bot_instances,
            self._users,
            self._aggregation_channels,
            self._connection_requests,
            self._connections,
        )

    @property
    def provisioned(self) -> bool:
        """Whether background provisioning has run to completion."""
        task = self._provisioning
        return task is not None and task.done() and not task.cancelled()

    @property
    def provisioning_errors(self) -> list[ProvisioningError]:
        """Failures recorded by background provisioning."""
        return list(self._provisioning_errors)

    # Lifecycle

    async def wait_provisioned(self) -> None:
        """Start provisioning if needed and wait for it to finish. Never raises."""
        task = self._start_provisioning()
        if not task.cancelled():
            await task

    async def close(self) -> None:
        """Cancel pending provisioning and release the connection pool if we own it."""
        task = self._provisioning
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._postgres is not None:
            await self._postgres.close()

    async def __aenter__(self) -> TableRoutingDataStore:
        await self.wait_provisioned()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # Get operations

    async def get_users(self) -> list[ConversationReference]:
        return await self._scan(self._users, ConversationReference)

    async def get_bot_instances(self) -> list[ConversationReference]:
        return await self._scan(self._bot_instances, ConversationReference)

    async def get_aggregation_channels(self) -> list[ConversationReference]:
        return await self._scan(self._aggregation_channels, ConversationReference)

    async def get_connection_requests(self) -> list[ConnectionRequest]:
        return await self._scan(self._connection_requests, ConnectionRequest)

    async def get_connections(self) -> list[Connection]:
        return await self._scan(self._connections, Connection)

    # Add operations

    async def add_conversation_reference(self, reference: ConversationReference) -> bool:
        table = self._reference_table(reference)
        return await self._insert(table, conversation_reference_key(reference), reference)

    async def add_aggregation_channel(self, channel: ConversationReference) -> bool:
        return await self._insert(
            self._aggregation_channels, conversation_reference_key(channel), channel
        )

    async def add_connection_request(self, request: ConnectionRequest) -> bool:
        return await self._insert(
            self._connection_requests, connection_request_key(request), request
        )

    async def add_connection(self, connection: Connection) -> bool:
        return await self._insert(self._connections, connection_key(connection), connection)

    # Remove operations

    async def remove_conversation_reference(self, reference: ConversationReference) -> bool:
        table = self._reference_table(reference)
        return await self._delete(table, conversation_reference_key(reference))

    async def remove_aggregation_channel(self, channel: ConversationReference) -> bool:
        return await self._delete(self._aggregation_channels, conversation_reference_key(channel))

    async def remove_connection_request(self, request: ConnectionRequest) -> bool:
        return await self._delete(self._connection_requests, connection_request_key(request))

    async def remove_connection(self, connection: Connection) -> bool:
        return await self._delete(self._connections, connection_key(connection))

    # Helpers

    def _reference_table(self, reference: ConversationReference) -> RoutingTable:
        return self._bot_instances if reference.is_bot else self._users

    async def _scan(self, table: RoutingTable, kind: type[EntityT]) -> list[EntityT]:
        self._ensure_started()
        rows = await table.scan_all()
        return [decode(row.body, kind) for row in rows]

    async def _insert(self, table: RoutingTable, key: str, entity: BaseModel) -> bool:
        self._ensure_started()
        return await table.insert(key, encode(entity))

    async def _delete(self, table: RoutingTable, key: str) -> bool:
        self._ensure_started()
        return await table.delete(key)

    def _create_table(self, table: str, pool: Any) -> RoutingTable:
        config = self._config
        name = config.table_name(table)
        if config.backend == "memory":
            service = InMemoryTableService.named(config.memory_name)
            return InMemoryRoutingTable(service, name, config.partition_key)

        from handoffkit.store.postgres import PostgresRoutingTable, PostgresTableService

        if self._postgres is None:
            self._postgres = PostgresTableService(
                config.connection_string.get_secret_value(),
                pool,
                min_size=config.pool_min_size,
                max_size=config.pool_max_size,
            )
        return PostgresRoutingTable(self._postgres, name, config.partition_key)

    def _ensure_started(self) -> None:
        # Stores built outside an event loop start provisioning on first use.
        if self._provisioning is None:
            self._start_provisioning()

    def _start_provisioning(self) -> asyncio.Task[None]:
        if self._provisioning is None:
            self._provisioning = asyncio.create_task(
                self._ensure_tables(), name="handoffkit:provision-tables"
            )
        return self._provisioning

    async def _ensure_tables(self) -> None:
        for table in self.tables:
            try:
                await table.ensure_exists()
            except ProvisioningError as exc:
                error = exc
            except Exception as exc:
                error = ProvisioningError(table.name, str(exc))
                error.__cause__ = exc
            else:
                logger.debug("Table %s is ready", table.name)
                continue
            logger.warning("%s", error)
            self._provisioning_errors.append(error)
