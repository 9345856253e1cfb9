"""Abstract base class for routing data storage."""

from __future__ import annotations

from abc import ABC, abstractmethod

from handoffkit.models.routing import Connection, ConnectionRequest, ConversationReference


class RoutingDataStore(ABC):
    """Persistent storage for routing endpoints, connection requests and connections.

    Implement this ABC to plug in any storage backend. The library ships
    with :class:`~handoffkit.store.table_store.TableRoutingDataStore`, which
    keeps each entity kind in its own key-value table.

    Add and remove operations report success as a boolean; they do not raise
    for missing rows or transient storage failures.
    """

    # Get operations

    @abstractmethod
    async def get_users(self) -> list[ConversationReference]:
        """List all user endpoints."""
        ...

    @abstractmethod
    async def get_bot_instances(self) -> list[ConversationReference]:
        """List all bot instance endpoints."""
        ...

    @abstractmethod
    async def get_aggregation_channels(self) -> list[ConversationReference]:
        """List all aggregation channels."""
        ...

    @abstractmethod
    async def get_connection_requests(self) -> list[ConnectionRequest]:
        """List all pending connection requests."""
        ...

    @abstractmethod
    async def get_connections(self) -> list[Connection]:
        """List all established connections."""
        ...

    # Add operations

    @abstractmethod
    async def add_conversation_reference(self, reference: ConversationReference) -> bool:
        """Store a user or bot instance endpoint, depending on ``reference.is_bot``."""
        ...

    @abstractmethod
    async def add_aggregation_channel(self, channel: ConversationReference) -> bool:
        """Store an aggregation channel."""
        ...

    @abstractmethod
    async def add_connection_request(self, request: ConnectionRequest) -> bool:
        """Store a connection request, replacing any earlier one by the same requestor."""
        ...

    @abstractmethod
    async def add_connection(self, connection: Connection) -> bool:
        """Store a connection."""
        ...

    # Remove operations

    @abstractmethod
    async def remove_conversation_reference(self, reference: ConversationReference) -> bool:
        """Remove a user or bot instance endpoint. Returns ``True`` if it existed."""
        ...

    @abstractmethod
    async def remove_aggregation_channel(self, channel: ConversationReference) -> bool:
        """Remove an aggregation channel. Returns ``True`` if it existed."""
        ...

    @abstractmethod
    async def remove_connection_request(self, request: ConnectionRequest) -> bool:
        """Remove the requestor's connection request. Returns ``True`` if it existed."""
        ...

    @abstractmethod
    async def remove_connection(self, connection: Connection) -> bool:
        """Remove a connection. Returns ``True`` if it existed."""
        ...
