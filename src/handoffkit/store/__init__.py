"""Routing data storage."""

from handoffkit.store.base import RoutingDataStore
from handoffkit.store.codec import decode, encode
from handoffkit.store.config import RoutingStoreConfig, RoutingTableNames
from handoffkit.store.keys import (
    connection_key,
    connection_request_key,
    conversation_reference_key,
)
from handoffkit.store.memory import InMemoryRoutingTable, InMemoryTableService
from handoffkit.store.table import RoutingRow, RoutingTable
from handoffkit.store.table_store import TableRoutingDataStore

__all__ = [
    "InMemoryRoutingTable",
    "InMemoryTableService",
    "RoutingDataStore",
    "RoutingRow",
    "RoutingStoreConfig",
    "RoutingTable",
    "RoutingTableNames",
    "TableRoutingDataStore",
    "connection_key",
    "connection_request_key",
    "conversation_reference_key",
    "decode",
    "encode",
]
