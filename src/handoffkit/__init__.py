"""HandoffKit - persistence for human-handoff message routing."""

from handoffkit.errors import (
    HandoffKitError,
    InvalidConfigurationError,
    MalformedPayloadError,
    ProvisioningError,
    TableNotFoundError,
)
from handoffkit.models.routing import (
    ChannelAccount,
    Connection,
    ConnectionRequest,
    ConversationAccount,
    ConversationReference,
)
from handoffkit.store import (
    InMemoryRoutingTable,
    InMemoryTableService,
    RoutingDataStore,
    RoutingRow,
    RoutingStoreConfig,
    RoutingTable,
    RoutingTableNames,
    TableRoutingDataStore,
)

__version__ = "0.1.0"

__all__ = [
    "ChannelAccount",
    "Connection",
    "ConnectionRequest",
    "ConversationAccount",
    "ConversationReference",
    "HandoffKitError",
    "InMemoryRoutingTable",
    "InMemoryTableService",
    "InvalidConfigurationError",
    "MalformedPayloadError",
    "ProvisioningError",
    "RoutingDataStore",
    "RoutingRow",
    "RoutingStoreConfig",
    "RoutingTable",
    "RoutingTableNames",
    "TableNotFoundError",
    "TableRoutingDataStore",
    "__version__",
]
