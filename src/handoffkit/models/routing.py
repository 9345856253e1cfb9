"""Routing entities: conversation endpoints, connection requests and connections."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RoutingModel(BaseModel):
    """Immutable value record serialized with camelCase field names.

    Unknown fields are kept and written back, so rows produced by other
    Bot Framework routers survive a read and rewrite unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ChannelAccount(_RoutingModel):
    """A user or bot account on a channel."""

    id: str
    name: str | None = None
    role: str | None = None
    aad_object_id: str | None = None


class ConversationAccount(_RoutingModel):
    """The conversation an endpoint belongs to."""

    id: str
    name: str | None = None
    is_group: bool | None = None
    conversation_type: str | None = None
    tenant_id: str | None = None
    role: str | None = None
    aad_object_id: str | None = None


class ConversationReference(_RoutingModel):
    """A single conversational endpoint (user, bot instance or channel).

    A reference that carries a ``bot`` account is a bot-owned endpoint and is
    stored with the bot instances; every other reference is a user endpoint.
    """

    conversation: ConversationAccount
    activity_id: str | None = None
    user: ChannelAccount | None = None
    bot: ChannelAccount | None = None
    channel_id: str | None = None
    service_url: str | None = None

    @property
    def conversation_id(self) -> str:
        return self.conversation.id

    @property
    def is_bot(self) -> bool:
        return self.bot is not None

    @classmethod
    def from_activity(
        cls, activity: dict[str, Any], *, is_bot: bool = False
    ) -> ConversationReference:
        """Build a reference from an inbound Bot Framework activity dict.

        With ``is_bot`` the recipient becomes the ``bot`` account and the
        reference addresses the bot instance; otherwise the sender becomes
        the ``user`` account.
        """
        sender = activity.get("from")
        recipient = activity.get("recipient")
        return cls(
            conversation=ConversationAccount.model_validate(activity["conversation"]),
            activity_id=activity.get("id"),
            user=None if is_bot or sender is None else ChannelAccount.model_validate(sender),
            bot=ChannelAccount.model_validate(recipient) if is_bot and recipient else None,
            channel_id=activity.get("channelId"),
            service_url=activity.get("serviceUrl"),
        )


class ConnectionRequest(_RoutingModel):
    """A pending request by ``requestor`` to be connected to another party."""

    requestor: ConversationReference
    connection_request_time: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Connection(_RoutingModel):
    """An established pairing of two endpoints."""

    conversation_reference1: ConversationReference
    conversation_reference2: ConversationReference
    time_since_last_activity: datetime = Field(default_factory=lambda: datetime.now(UTC))
