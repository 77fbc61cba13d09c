#!/usr/bin/env python3
# keycraft/db/vault/errors.py
from __future__ import annotations

"""
Tagged error values raised by the key store.

Every error carries a short `kind` tag and a human-readable message. Hosts
show `str(err)` as-is, or ship `err.to_dict()` across a process boundary.
"""


class KeyStoreError(Exception):
    """Base class for all key store failures."""

    kind: str = "key_store_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class StorageUnavailable(KeyStoreError):
    """The database file/directory could not be created, opened, read or written."""

    kind = "storage_unavailable"

    @classmethod
    def database(cls, detail: object) -> "StorageUnavailable":
        return cls(f"Database Error: {detail}")

    @classmethod
    def io(cls, detail: object) -> "StorageUnavailable":
        return cls(f"IO Error: {detail}")


class NotInitialized(KeyStoreError):
    kind = "not_initialized"

    def __init__(self, message: str = "Database is not initialized") -> None:
        super().__init__(message)


class EncodeFailure(KeyStoreError):
    """A structured field could not be turned into its stored text form."""

    kind = "encode_failure"

    def __init__(self, detail: object) -> None:
        super().__init__(f"Serialization Error: {detail}")


class DecodeFailure(KeyStoreError):
    """A stored structured field could not be parsed back (recovered per row)."""

    kind = "decode_failure"

    def __init__(self, detail: object) -> None:
        super().__init__(f"Serialization Error: {detail}")
