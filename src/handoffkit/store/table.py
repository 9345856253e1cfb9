"""Abstract key-value table holding one kind of routing entity."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple


class RoutingRow(NamedTuple):
    """One stored row: its key within the partition and the encoded entity."""

    key: str
    body: str


class RoutingTable(ABC):
    """A flat key-value namespace whose rows share one partition key.

    The partition key is fixed per table instance and never exposed through
    the row API. Implement this ABC to back the routing data store with a
    different medium.
    """

    def __init__(self, name: str, partition_key: str) -> None:
        self._name = name
        self._partition_key = partition_key

    @property
    def name(self) -> str:
        return self._name

    @property
    def partition_key(self) -> str:
        return self._partition_key

    @abstractmethod
    async def ensure_exists(self) -> None:
        """Create the table if it is missing.

        An existing table is not an error. Any other failure is raised as
        :class:`~handoffkit.errors.ProvisioningError`.
        """
        ...

    @abstractmethod
    async def insert(self, key: str, body: str) -> bool:
        """Write *body* under *key*, replacing any existing row.

        Returns ``False`` if the medium rejected or failed the write.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete the row at *key*. Returns ``True`` if a row was removed."""
        ...

    @abstractmethod
    async def scan_all(self) -> list[RoutingRow]:
        """Return every row in the partition, in no particular order.

        Raises :class:`~handoffkit.errors.TableNotFoundError` if the table
        has not been provisioned.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
