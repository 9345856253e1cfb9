"""Tests for row key derivation."""

from __future__ import annotations

from datetime import UTC, datetime

from handoffkit.store.keys import (
    connection_key,
    connection_request_key,
    conversation_reference_key,
)
from tests.conftest import make_connection, make_reference, make_request


class TestKeys:
    def test_conversation_reference_key(self) -> None:
        assert conversation_reference_key(make_reference("conv-1")) == "conv-1"
        assert conversation_reference_key(make_reference("conv-1", is_bot=True)) == "conv-1"

    def test_connection_request_key_ignores_timestamp(self) -> None:
        early = make_request("u2", datetime(2024, 1, 1, tzinfo=UTC))
        late = make_request("u2", datetime(2024, 6, 1, tzinfo=UTC))
        assert connection_request_key(early) == connection_request_key(late) == "u2"

    def test_connection_key_concatenates_in_order(self) -> None:
        assert connection_key(make_connection("u1", "b1")) == "u1b1"

    def test_connection_key_is_stable(self) -> None:
        assert connection_key(make_connection("u1", "b1")) == connection_key(
            make_connection("u1", "b1")
        )

    def test_connection_key_is_not_symmetric(self) -> None:
        assert connection_key(make_connection("u1", "b1")) != connection_key(
            make_connection("b1", "u1")
        )

    def test_empty_ids(self) -> None:
        assert connection_key(make_connection("", "")) == ""
