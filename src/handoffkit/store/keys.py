"""Row key derivation for routing entities.

Keys come from entity content only, so the same rule locates a row for
both insertion and removal.
"""

from __future__ import annotations

from handoffkit.models.routing import Connection, ConnectionRequest, ConversationReference


def conversation_reference_key(reference: ConversationReference) -> str:
    return reference.conversation_id


def connection_request_key(request: ConnectionRequest) -> str:
    return request.requestor.conversation_id


def connection_key(connection: Connection) -> str:
    """Concatenate both conversation ids in field order.

    The key is not symmetric: a connection (A, B) and a connection (B, A)
    are stored as two different rows.
    """
    return (
        connection.conversation_reference1.conversation_id
        + connection.conversation_reference2.conversation_id
    )
