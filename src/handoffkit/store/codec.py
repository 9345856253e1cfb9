"""JSON codec for routing entities.

Every routing table stores the same row shape; the entity-specific
structure lives entirely in the JSON body produced here.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from handoffkit.errors import MalformedPayloadError

__all__ = ["decode", "encode"]

EntityT = TypeVar("EntityT", bound=BaseModel)


def encode(entity: BaseModel) -> str:
    """Serialize *entity* to a deterministic JSON document."""
    return entity.model_dump_json(by_alias=True)


def decode(payload: str | bytes, kind: type[EntityT]) -> EntityT:
    """Parse *payload* back into an instance of *kind*.

    Raises:
        MalformedPayloadError: If the payload is not JSON or does not match
            the shape of *kind*.
    """
    try:
        return kind.model_validate_json(payload)
    except ValidationError as exc:
        raise MalformedPayloadError(kind.__name__, str(exc)) from exc
