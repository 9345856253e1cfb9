"""PostgreSQL routing tables using asyncpg."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from handoffkit.errors import ProvisioningError, TableNotFoundError
from handoffkit.store.table import RoutingRow, RoutingTable

logger = logging.getLogger("handoffkit.store.postgres")

_CREATE_TABLE = """\
CREATE TABLE IF NOT EXISTS {table} (
    partition_key TEXT NOT NULL,
    row_key TEXT NOT NULL,
    body TEXT NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    PRIMARY KEY (partition_key, row_key)
)"""

_UPSERT = """\
INSERT INTO {table} (partition_key, row_key, body) VALUES ($1, $2, $3)
ON CONFLICT (partition_key, row_key)
DO UPDATE SET body = EXCLUDED.body, updated_at = now()"""


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class PostgresTableService:
    """Connection pool shared by the routing tables of one store.

    The pool is created lazily on first use unless an existing asyncpg pool
    is passed in; a pool passed in is never closed by :meth:`close`.
    """

    def __init__(
        self,
        dsn: str | None = None,
        pool: Any = None,
        *,
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        try:
            import asyncpg as _asyncpg
        except ImportError as exc:
            raise ImportError(
                "asyncpg is required for PostgreSQL routing tables. "
                "Install it with: pip install handoffkit[postgres]"
            ) from exc
        self._asyncpg = _asyncpg
        self._dsn = dsn
        self._pool = pool
        self._owns_pool = pool is None
        self._min_size = min_size
        self._max_size = max_size
        self._pool_lock = asyncio.Lock()

    @property
    def errors(self) -> Any:
        """The ``asyncpg.exceptions`` module."""
        return self._asyncpg.exceptions

    async def get_pool(self) -> Any:
        if self._pool is None:
            async with self._pool_lock:
                if self._pool is None:
                    self._pool = await self._asyncpg.create_pool(
                        self._dsn,
                        min_size=self._min_size,
                        max_size=self._max_size,
                    )
        return self._pool

    async def close(self) -> None:
        """Release the connection pool if we own it."""
        if self._pool is not None and self._owns_pool:
            await self._pool.close()
            self._pool = None


class PostgresRoutingTable(RoutingTable):
    """Routing table stored as one PostgreSQL table keyed by (partition_key, row_key)."""

    def __init__(self, service: PostgresTableService, name: str, partition_key: str) -> None:
        super().__init__(name, partition_key)
        self._service = service
        self._table = _quote(name)

    async def ensure_exists(self) -> None:
        errors = self._service.errors
        try:
            pool = await self._service.get_pool()
            async with pool.acquire() as conn:
                await conn.execute(_CREATE_TABLE.format(table=self._table))
        except (errors.DuplicateTableError, errors.UniqueViolationError):
            # Lost a CREATE race against another store instance.
            pass
        except Exception as exc:
            raise ProvisioningError(self.name, str(exc)) from exc
        logger.debug("Table %s created or already exists", self.name)

    async def insert(self, key: str, body: str) -> bool:
        try:
            pool = await self._service.get_pool()
            async with pool.acquire() as conn:
                await conn.execute(
                    _UPSERT.format(table=self._table), self.partition_key, key, body
                )
        except Exception:
            logger.warning("Insert into %s failed for key %r", self.name, key, exc_info=True)
            return False
        return True

    async def delete(self, key: str) -> bool:
        try:
            pool = await self._service.get_pool()
            async with pool.acquire() as conn:
                tag = await conn.execute(
                    f"DELETE FROM {self._table} WHERE partition_key = $1 AND row_key = $2",
                    self.partition_key,
                    key,
                )
        except Exception:
            logger.warning("Delete from %s failed for key %r", self.name, key, exc_info=True)
            return False
        return bool(tag == "DELETE 1")

    async def scan_all(self) -> list[RoutingRow]:
        pool = await self._service.get_pool()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT row_key, body FROM {self._table} WHERE partition_key = $1",
                    self.partition_key,
                )
        except self._service.errors.UndefinedTableError as exc:
            raise TableNotFoundError(self.name) from exc
        return [RoutingRow(r["row_key"], r["body"]) for r in rows]
