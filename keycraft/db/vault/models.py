#!/usr/bin/env python3
# keycraft/db/vault/models.py
from __future__ import annotations

"""
Record model for stored API keys.

`code_snippets` and `tags` are opaque text encoded by the caller (the UI
sends a comma-separated tag string and a free-form snippet blob). Nothing in
this module looks inside them.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

REQUIRED_FIELDS: tuple[str, ...] = ("name", "vendor", "value")
OPTIONAL_FIELDS: tuple[str, ...] = (
    "base_url", "doc_url", "code_snippets", "tags", "notes")
STRUCTURED_FIELDS: tuple[str, ...] = ("code_snippets", "tags")


@dataclass(slots=True)
class ApiKey:
    """
    One credential entry.

    Attributes:
        id: Store-generated identifier (UUID4 text). Ignored on create.
        name: Display name.
        vendor: Provider / vendor name.
        value: The secret itself, stored in full.
        masked_value: Display form of `value`, always recomputed by the store.
        base_url, doc_url, notes: Optional free text.
        code_snippets, tags: Optional caller-encoded text.
        created_at, updated_at: Store-assigned ISO-8601 timestamps.
    """

    name: str
    vendor: str
    value: str = field(repr=False)
    id: str = ""
    masked_value: str = ""
    base_url: str | None = None
    doc_url: str | None = None
    code_snippets: str | None = None
    tags: str | None = None
    notes: str | None = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Host-native form: every field present, absent optionals as None."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ApiKey":
        """
        Build a record from a host payload.

        Raises:
            ValueError: a required field is missing.
        """
        missing = [k for k in REQUIRED_FIELDS if payload.get(k) is None]
        if missing:
            raise ValueError(f"Missing required field(s): {', '.join(missing)}")

        known = {f.name for f in fields(cls)}
        data: dict[str, Any] = {
            k: v for k, v in payload.items() if k in known}
        for key in OPTIONAL_FIELDS:
            # blank form inputs arrive as ''
            if data.get(key) == "":
                data[key] = None
        for key in ("id", "masked_value", "created_at", "updated_at"):
            if data.get(key) is None:
                data[key] = ""
        return cls(**data)
