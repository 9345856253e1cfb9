"""Tests for the routing entity codec."""

from __future__ import annotations

import json
from typing import Any

import pytest

from handoffkit.errors import MalformedPayloadError
from handoffkit.models.routing import (
    Connection,
    ConnectionRequest,
    ConversationAccount,
    ConversationReference,
)
from handoffkit.store.codec import decode, encode
from tests.conftest import make_connection, make_reference, make_request


def _without_nulls(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _without_nulls(v) for k, v in value.items() if v is not None}
    return value

class TestRoundTrip:
    @pytest.mark.parametrize("is_bot", [False, True])
    def test_conversation_reference(self, is_bot: bool) -> None:
        ref = make_reference("conv-1", is_bot=is_bot)
        assert decode(encode(ref), ConversationReference) == ref

    def test_minimal_reference_with_empty_id(self) -> None:
        ref = ConversationReference(conversation=ConversationAccount(id=""))
        assert decode(encode(ref), ConversationReference) == ref

    def test_connection_request_with_empty_id(self) -> None:
        request = make_request("")
        assert decode(encode(request), ConnectionRequest) == request

    def test_connection_with_empty_ids(self) -> None:
        connection = make_connection("", "")
        assert decode(encode(connection), Connection) == connection

    def test_connection_request(self) -> None:
        request = make_request("u2")
        assert decode(encode(request), ConnectionRequest) == request

    def test_connection(self) -> None:
        connection = make_connection("u1", "b1")
        assert decode(encode(connection), Connection) == connection

    def test_decode_accepts_bytes(self) -> None:
        ref = make_reference()
        assert decode(encode(ref).encode(), ConversationReference) == ref


class TestEncode:
    def test_deterministic(self) -> None:
        assert encode(make_connection()) == encode(make_connection())

    def test_uses_camel_case_field_names(self) -> None:
        doc = json.loads(encode(make_connection()))
        assert set(doc) == {
            "conversationReference1",
            "conversationReference2",
            "timeSinceLastActivity",
        }
        assert doc["conversationReference1"]["serviceUrl"] == "https://smba.example.com/"

    def test_decodes_bot_framework_document(self) -> None:
        payload = json.dumps(
            {
                "activityId": "a1",
                "bot": {"id": "bot-1", "name": "Helpdesk"},
                "conversation": {"id": "conv-7", "isGroup": False},
                "channelId": "msteams",
                "serviceUrl": "https://smba.trafficmanager.net/emea/",
            }
        )
        ref = decode(payload, ConversationReference)
        assert ref.conversation_id == "conv-7"
        assert ref.is_bot is True


class TestForeignRows:
    payload = {
        "bot": {"id": "bot-1", "name": "Helpdesk", "aadObjectId": "9f1c-bot"},
        "conversation": {
            "id": "conv-7",
            "tenantId": "contoso",
            "role": "user",
            "aadObjectId": "41ab-conv",
        },
        "channelId": "msteams",
        "locale": "en-US",
    }

    def test_known_account_fields(self) -> None:
        ref = decode(json.dumps(self.payload), ConversationReference)
        assert ref.bot is not None
        assert ref.bot.aad_object_id == "9f1c-bot"
        assert ref.conversation.role == "user"
        assert ref.conversation.aad_object_id == "41ab-conv"

    def test_rewrite_keeps_every_field(self) -> None:
        ref = decode(json.dumps(self.payload), ConversationReference)
        assert _without_nulls(json.loads(encode(ref))) == self.payload


class TestMalformed:
    def test_not_json(self) -> None:
        with pytest.raises(MalformedPayloadError) as exc_info:
            decode("{not json", ConversationReference)
        assert exc_info.value.kind == "ConversationReference"

    def test_wrong_shape(self) -> None:
        with pytest.raises(MalformedPayloadError):
            decode(encode(make_reference()), Connection)

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode("[]", ConnectionRequest)
