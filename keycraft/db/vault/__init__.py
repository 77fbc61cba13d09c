#!/usr/bin/env python3
# keycraft/db/vault/__init__.py
from __future__ import annotations

"""
Vault: API key records, masking, and the SQLite-backed key store.
"""

from .errors import (  # noqa: F401
    KeyStoreError,
    StorageUnavailable,
    NotInitialized,
    EncodeFailure,
    DecodeFailure,
)
from .models import ApiKey  # noqa: F401
from .keystore import KeyStore, mask_value  # noqa: F401

__all__ = [
    "ApiKey",
    "KeyStore",
    "mask_value",
    "KeyStoreError",
    "StorageUnavailable",
    "NotInitialized",
    "EncodeFailure",
    "DecodeFailure",
]
