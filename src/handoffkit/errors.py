"""Exceptions raised by the routing data store."""

from __future__ import annotations

__all__ = [
    "HandoffKitError",
    "InvalidConfigurationError",
    "MalformedPayloadError",
    "ProvisioningError",
    "TableNotFoundError",
]


class HandoffKitError(Exception):
    """Base exception for all HandoffKit errors."""


class InvalidConfigurationError(HandoffKitError, ValueError):
    """The backing-medium descriptor is missing, empty or malformed."""


class ProvisioningError(HandoffKitError):
    """A routing table could not be created."""

    def __init__(self, table: str, message: str) -> None:
        super().__init__(f"Failed to provision table '{table}': {message}")
        self.table = table


class MalformedPayloadError(HandoffKitError, ValueError):
    """A stored payload does not decode into the expected entity."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"Malformed {kind} payload: {message}")
        self.kind = kind


class TableNotFoundError(HandoffKitError):
    """The table does not exist (yet). Retryable while provisioning runs."""

    def __init__(self, table: str) -> None:
        super().__init__(f"Table '{table}' does not exist")
        self.table = table
