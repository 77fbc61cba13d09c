#!/usr/bin/env python3
# keycraft/security/__init__.py
from __future__ import annotations

"""
Package for the per-user data directory.

Provides:
- Default location lookup (`default_data_root`).
- Creation with owner-only permissions (`ensure_data_dir`).
- Database path resolution from configuration (`resolve_db_path`).
"""


from .secure_dir import default_data_root, ensure_data_dir, resolve_db_path

__all__ = ["default_data_root", "ensure_data_dir", "resolve_db_path"]
