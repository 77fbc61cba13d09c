# keycraft/plugins/keys/entrypoint.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from keycraft.commands import CommandResult, command
from keycraft.db.vault import ApiKey, KeyStore
from keycraft.ui import format_table

logger = logging.getLogger(__name__)

MIN_PREFIX_LEN = 6
SHORT_ID_LEN = 8

# never initialized, so every operation raises NotInitialized
_UNBOUND = KeyStore()
_STORE: KeyStore = _UNBOUND
_REVEAL_SECRETS = False


def bind_store(store: KeyStore | None, *, reveal_secrets: bool = False) -> None:
    """Attach the store the commands operate on (None detaches)."""
    global _STORE, _REVEAL_SECRETS
    _STORE = store if store is not None else _UNBOUND
    _REVEAL_SECRETS = reveal_secrets


def current_store() -> KeyStore:
    return _STORE


# ---------- helpers ----------

def _fmt_ts(ts: str) -> str:
    """Format ISO8601 timestamps into human-readable local time."""
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return ts
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def _split_tags(text: str | None) -> list[str]:
    if not text:
        return []
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def _opt(value: str | None) -> str | None:
    return value if value else None


def _resolve(identifier: str) -> ApiKey:
    """
    Find a record by full id or unique id prefix.

    Raises:
        LookupError: nothing matches.
        ValueError: the prefix is ambiguous or too short.
    """
    store = current_store()
    found = store.get(identifier)
    if found is not None:
        return found
    if len(identifier) < MIN_PREFIX_LEN:
        raise LookupError(
            f"No key with id '{identifier}' (prefixes need at least {MIN_PREFIX_LEN} characters).")

    matches = [k for k in store.list_all() if k.id.startswith(identifier)]
    if not matches:
        raise LookupError(f"No key with id '{identifier}'.")
    if len(matches) > 1:
        ids = ", ".join(k.id[:SHORT_ID_LEN] for k in matches)
        raise ValueError(f"Ambiguous id prefix '{identifier}' matches: {ids}")
    return matches[0]


# ---------- completion providers ----------

def _complete_ids(text: str = "") -> list[str]:
    store = current_store()
    if not store.is_initialized:
        return []
    return [k.id for k in store.list_all() if k.id.startswith(text)]


def _complete_vendors(text: str = "") -> list[str]:
    store = current_store()
    if not store.is_initialized:
        return []
    vendors = {k.vendor for k in store.list_all()}
    return sorted(v for v in vendors if v.lower().startswith(text.lower()))


def _complete_tags(text: str = "") -> list[str]:
    store = current_store()
    if not store.is_initialized:
        return []
    tags = {tag for k in store.list_all() for tag in _split_tags(k.tags)}
    return sorted(t for t in tags if t.startswith(text))


# ---------- commands ----------

@command(
    name="key-add",
    description="Store a new API key.",
    example="key-add openai-prod OpenAI sk-... tags=prod,llm",
    category="keys",
    aliases=["add"],
    completers={"pos1": _complete_vendors, "tags": _complete_tags},
)
def key_add(
    name: str,
    vendor: str,
    value: str,
    *,
    base_url: str | None = None,
    doc_url: str | None = None,
    tags: str | None = None,
    code_snippets: str | None = None,
    notes: str | None = None,
) -> CommandResult:
    created = current_store().add(ApiKey(
        name=name,
        vendor=vendor,
        value=value,
        base_url=_opt(base_url),
        doc_url=_opt(doc_url),
        code_snippets=_opt(code_snippets),
        tags=_opt(tags),
        notes=_opt(notes),
    ))
    return CommandResult(
        ok=True,
        message=f"Added '{created.name}' ({created.vendor}) {created.masked_value}  id={created.id}",
        data=created.id,
    )


@command(
    name="key-list",
    description="List stored keys, newest first (masked).",
    example="key-list vendor=openai tag=prod",
    category="keys",
    aliases=["ls", "list"],
    completers={"vendor": _complete_vendors, "tag": _complete_tags},
)
def key_list(*, vendor: str | None = None, tag: str | None = None) -> str:
    keys = current_store().list_all()
    if vendor:
        keys = [k for k in keys if k.vendor.lower() == vendor.lower()]
    if tag:
        wanted = tag.strip().lower()
        keys = [k for k in keys if wanted in (t.lower() for t in _split_tags(k.tags))]

    if not keys:
        return "No keys stored." if not (vendor or tag) else "No keys match the filter."

    rows = [
        [
            k.id[:SHORT_ID_LEN],
            k.name,
            k.vendor,
            k.masked_value,
            ", ".join(_split_tags(k.tags)),
            _fmt_ts(k.created_at),
        ]
        for k in keys
    ]
    return format_table(
        rows,
        headers=["ID", "Name", "Vendor", "Key", "Tags", "Created"],
        max_cell_width=40,
    )


@command(
    name="key-show",
    description="Show every field of one key.",
    example="key-show 3f2a9c reveal=true",
    category="keys",
    aliases=["show"],
    completers={"pos0": _complete_ids},
)
def key_show(identifier: str, *, reveal: bool = False) -> str:
    record = _resolve(identifier)
    secret = record.value if (reveal or _REVEAL_SECRETS) else record.masked_value
    if reveal:
        logger.info("Secret revealed for key %s", record.id)

    rows = [
        ["ID", record.id],
        ["Name", record.name],
        ["Vendor", record.vendor],
        ["Key", secret],
        ["Base URL", record.base_url],
        ["Docs", record.doc_url],
        ["Tags", ", ".join(_split_tags(record.tags))],
        ["Snippets", record.code_snippets],
        ["Notes", record.notes],
        ["Created", _fmt_ts(record.created_at)],
        ["Updated", _fmt_ts(record.updated_at)],
    ]
    return format_table(rows, headers=["Field", "Value"])


@command(
    name="key-update",
    description="Change fields of a stored key (field= clears an optional field).",
    example="key-update 3f2a9c value=sk-new notes=",
    category="keys",
    aliases=["update", "edit"],
    completers={"pos0": _complete_ids, "vendor": _complete_vendors, "tags": _complete_tags},
)
def key_update(
    identifier: str,
    *,
    name: str | None = None,
    vendor: str | None = None,
    value: str | None = None,
    base_url: str | None = None,
    doc_url: str | None = None,
    tags: str | None = None,
    code_snippets: str | None = None,
    notes: str | None = None,
) -> CommandResult:
    record = _resolve(identifier)

    changes: dict[str, str | None] = {}
    for field_name, supplied in (("name", name), ("vendor", vendor), ("value", value)):
        if supplied is None:
            continue
        if not supplied:
            raise ValueError(f"'{field_name}' cannot be empty.")
        changes[field_name] = supplied
    for field_name, supplied in (
        ("base_url", base_url),
        ("doc_url", doc_url),
        ("tags", tags),
        ("code_snippets", code_snippets),
        ("notes", notes),
    ):
        if supplied is not None:
            changes[field_name] = _opt(supplied)

    if not changes:
        return CommandResult(ok=False, message="Nothing to update.")

    updated = current_store().update(replace(record, **changes))
    return CommandResult(
        ok=True,
        message=f"Updated '{updated.name}' ({', '.join(sorted(changes))})  id={updated.id}",
        data=updated.id,
    )


@command(
    name="key-delete",
    description="Delete a stored key.",
    example="key-delete 3f2a9c",
    category="keys",
    aliases=["rm", "delete"],
    completers={"pos0": _complete_ids},
)
def key_delete(identifier: str) -> str:
    try:
        key_id = _resolve(identifier).id
    except LookupError:
        # deleting an unknown id is a no-op
        key_id = identifier
    current_store().delete(key_id)
    return f"Deleted {key_id}"
