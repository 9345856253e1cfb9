"""In-memory routing tables for development and testing."""

from __future__ import annotations

import logging
from typing import ClassVar

from handoffkit.errors import TableNotFoundError
from handoffkit.store.table import RoutingRow, RoutingTable

logger = logging.getLogger("handoffkit.store.memory")


class InMemoryTableService:
    """Dict-based stand-in for a partitioned table service.

    Tables map partition key -> row key -> body. Services obtained through
    :meth:`named` are shared process-wide, so several stores built from the
    same ``memory://<name>`` descriptor see the same data.
    """

    _registry: ClassVar[dict[str, InMemoryTableService]] = {}

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, str]]] = {}

    @classmethod
    def named(cls, name: str) -> InMemoryTableService:
        """Return the shared service registered under *name*, creating it if needed."""
        service = cls._registry.get(name)
        if service is None:
            service = cls._registry[name] = cls()
        return service

    @classmethod
    def reset(cls) -> None:
        """Forget every named service."""
        cls._registry.clear()

    def create_table(self, table: str) -> bool:
        """Create *table*. Returns ``False`` if it already existed."""
        if table in self._tables:
            return False
        self._tables[table] = {}
        return True

    def drop_table(self, table: str) -> bool:
        return self._tables.pop(table, None) is not None

    def has_table(self, table: str) -> bool:
        return table in self._tables

    def put(self, table: str, partition_key: str, row_key: str, body: str) -> None:
        self._partition(table, partition_key)[row_key] = body

    def remove(self, table: str, partition_key: str, row_key: str) -> bool:
        partition = self._partition(table, partition_key)
        return partition.pop(row_key, None) is not None

    def query(self, table: str, partition_key: str) -> list[tuple[str, str]]:
        return list(self._partition(table, partition_key).items())

    def _partition(self, table: str, partition_key: str) -> dict[str, str]:
        partitions = self._tables.get(table)
        if partitions is None:
            raise TableNotFoundError(table)
        return partitions.setdefault(partition_key, {})


class InMemoryRoutingTable(RoutingTable):
    """Routing table backed by an :class:`InMemoryTableService`."""

    def __init__(self, service: InMemoryTableService, name: str, partition_key: str) -> None:
        super().__init__(name, partition_key)
        self._service = service

    async def ensure_exists(self) -> None:
        created = self._service.create_table(self.name)
        logger.debug("Table %s %s", self.name, "created" if created else "already exists")

    async def insert(self, key: str, body: str) -> bool:
        try:
            self._service.put(self.name, self.partition_key, key, body)
        except TableNotFoundError:
            logger.warning("Insert into %s failed: table does not exist", self.name)
            return False
        return True

    async def delete(self, key: str) -> bool:
        try:
            return self._service.remove(self.name, self.partition_key, key)
        except TableNotFoundError:
            logger.warning("Delete from %s failed: table does not exist", self.name)
            return False

    async def scan_all(self) -> list[RoutingRow]:
        rows = self._service.query(self.name, self.partition_key)
        return [RoutingRow(key, body) for key, body in rows]
