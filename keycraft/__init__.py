#!/usr/bin/env python3
# keycraft/__init__.py
from __future__ import annotations
"""
KeyCraft: a local API key vault with an interactive shell.

Subpackages expose their own APIs (`keycraft.db`, `keycraft.commands`,
`keycraft.interface`, ...); only the storage core is re-exported here.
"""

__version__ = "0.1.0"

from keycraft.db.vault import (  # noqa: E402
    ApiKey,
    KeyStore,
    KeyStoreError,
    mask_value,
)

__all__ = ["__version__", "ApiKey", "KeyStore", "KeyStoreError", "mask_value"]
