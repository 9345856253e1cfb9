"""Shared test fixtures and helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from datetime import UTC, datetime

import pytest

from handoffkit.models.routing import (
    ChannelAccount,
    Connection,
    ConnectionRequest,
    ConversationAccount,
    ConversationReference,
)
from handoffkit.store.memory import InMemoryTableService
from handoffkit.store.table_store import TableRoutingDataStore


@pytest.fixture(autouse=True)
def _reset_memory_services() -> Iterator[None]:
    InMemoryTableService.reset()
    yield
    InMemoryTableService.reset()


@pytest.fixture
async def store() -> AsyncIterator[TableRoutingDataStore]:
    s = TableRoutingDataStore("memory://test")
    await s.wait_provisioned()
    yield s
    await s.close()


def make_reference(
    conversation_id: str = "conv-1",
    *,
    is_bot: bool = False,
    channel_id: str = "webchat",
) -> ConversationReference:
    account = ChannelAccount(id=f"{'bot' if is_bot else 'user'}-{conversation_id}")
    return ConversationReference(
        conversation=ConversationAccount(id=conversation_id),
        user=None if is_bot else account,
        bot=account if is_bot else None,
        channel_id=channel_id,
        service_url="https://smba.example.com/",
    )


def make_request(
    conversation_id: str = "u1",
    requested_at: datetime | None = None,
) -> ConnectionRequest:
    return ConnectionRequest(
        requestor=make_reference(conversation_id),
        connection_request_time=requested_at or datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
    )


def make_connection(first: str = "u1", second: str = "b1") -> Connection:
    return Connection(
        conversation_reference1=make_reference(first),
        conversation_reference2=make_reference(second, is_bot=True),
        time_since_last_activity=datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
    )
