"""Custom exception hierarchy for prefstore."""

from __future__ import annotations


class PrefStoreError(Exception):
    """Base exception for all prefstore errors."""


class PrefStoreConfigError(PrefStoreError):
    """Invalid or missing configuration."""


class UnknownFieldError(PrefStoreError, KeyError):
    """Field name is not part of the preference snapshot."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"unknown preference field: {field!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class StorageError(PrefStoreError):
    """The storage collaborator failed to read, write or remove a record."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class SnapshotDecodeError(PrefStoreError):
    """A persisted record could not be parsed into a snapshot mapping."""
