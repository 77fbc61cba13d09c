#!/usr/bin/env python3
# keycraft/boot/__init__.py
from __future__ import annotations
"""
Boot sequence package.

Exports:
- boot_sequence: startup pipeline with Linux-style [  OK  ] / [FAILED] lines.
- BootState: config, logger, open key store, database path, plugin count.
"""


from .boot import BootState, boot_sequence

__all__ = ["boot_sequence", "BootState"]
