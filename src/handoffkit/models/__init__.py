"""Routing data models."""

from handoffkit.models.routing import (
    ChannelAccount,
    Connection,
    ConnectionRequest,
    ConversationAccount,
    ConversationReference,
)

__all__ = [
    "ChannelAccount",
    "Connection",
    "ConnectionRequest",
    "ConversationAccount",
    "ConversationReference",
]
