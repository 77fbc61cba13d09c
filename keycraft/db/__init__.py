#!/usr/bin/env python3
# keycraft/db/__init__.py
from __future__ import annotations

"""
Package for database persistence and configuration.

Provides:
- Configuration loader with file and KEYCRAFT_* environment overrides (`config`).
- SQLite plumbing: connection pragmas and the api_keys schema (`db`).
- The key store itself (`vault`).
"""


from .config import AppConfig, load_config, default_data_path
from .db import (
    DB_FILENAME,
    SCHEMA,
    open_connection,
    initialize_schema,
)
from .vault import (
    ApiKey,
    KeyStore,
    mask_value,
    KeyStoreError,
    StorageUnavailable,
    NotInitialized,
    EncodeFailure,
    DecodeFailure,
)

__all__ = [
    "AppConfig",
    "load_config",
    "default_data_path",
    "DB_FILENAME",
    "SCHEMA",
    "open_connection",
    "initialize_schema",
    "ApiKey",
    "KeyStore",
    "mask_value",
    "KeyStoreError",
    "StorageUnavailable",
    "NotInitialized",
    "EncodeFailure",
    "DecodeFailure",
]
