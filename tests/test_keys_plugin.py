"""Tests for the key management commands in keycraft.plugins.keys."""

from __future__ import annotations

import json
import sqlite3

import pytest

from keycraft.interface import handle_line, run_command, suggest

SECRET = "sk-ABCDEFGHIJKL"


@pytest.fixture
def added_id(keys_commands):
    result = keys_commands.key_add("OpenAI", "OpenAI", SECRET, tags="prod,llm")
    assert result.ok
    return result.data


def _insert_raw(store, key_id: str, name: str) -> None:
    raw = sqlite3.connect(str(store.path))
    with raw:
        raw.execute(
            "INSERT INTO api_keys (id, name, vendor, value, masked_value, code_snippets, tags,"
            " created_at, updated_at) VALUES (?, ?, 'v', 'secret-value', 'sec...alue', ?, ?, ?, ?)",
            (key_id, name, json.dumps(None), json.dumps(None),
             "2024-01-01T00:00:00.000000+00:00", "2024-01-01T00:00:00.000000+00:00"),
        )
    raw.close()


class TestKeyAdd:
    def test_add_reports_masked_value_only(self, keys_commands, store):
        output, ok = run_command(f"add Anthropic Anthropic {SECRET} notes='team key'")
        assert ok
        assert "sk-...IJKL" in output
        assert SECRET not in output
        (stored,) = store.list_all()
        assert stored.value == SECRET
        assert stored.notes == "team key"

    def test_blank_optional_is_stored_as_none(self, keys_commands, store):
        run_command(f"key-add n v {SECRET} base_url=")
        assert store.list_all()[0].base_url is None

    def test_missing_value_shows_usage(self, keys_commands):
        output, ok = run_command("key-add onlyname OpenAI")
        assert not ok
        assert "Missing required argument: value" in output
        assert "Usage: key-add <name> <vendor> <value>" in output


class TestKeyList:
    def test_empty(self, keys_commands):
        assert handle_line("key-list") == "No keys stored."

    def test_shows_masked_not_secret(self, keys_commands, added_id):
        output = handle_line("ls")
        assert "sk-...IJKL" in output
        assert SECRET not in output
        assert added_id[:8] in output
        assert "prod, llm" in output

    def test_vendor_filter_is_case_insensitive(self, keys_commands, added_id):
        keys_commands.key_add("Other", "Stripe", "rk_live_0123456789")
        output = handle_line("key-list vendor=openai")
        assert "OpenAI" in output
        assert "Stripe" not in output

    def test_tag_filter(self, keys_commands, added_id):
        keys_commands.key_add("Other", "Stripe", "rk_live_0123456789", tags="payments")
        assert "Stripe" in handle_line("key-list tag=payments")
        assert handle_line("key-list tag=missing") == "No keys match the filter."


class TestKeyShow:
    def test_masked_by_default(self, keys_commands, added_id):
        output = handle_line(f"show {added_id}")
        assert "sk-...IJKL" in output
        assert SECRET not in output

    def test_reveal(self, keys_commands, added_id):
        assert SECRET in handle_line(f"key-show {added_id} reveal=true")

    def test_reveal_by_config(self, keys_commands, store, added_id):
        keys_commands.bind_store(store, reveal_secrets=True)
        assert SECRET in handle_line(f"key-show {added_id}")

    def test_unique_prefix(self, keys_commands, added_id):
        assert added_id in handle_line(f"key-show {added_id[:6]}")

    def test_short_unknown_prefix(self, keys_commands, added_id):
        output, ok = run_command("key-show abc")
        assert not ok
        assert output.startswith("[error] No key with id 'abc'")

    def test_ambiguous_prefix(self, keys_commands, store):
        _insert_raw(store, "abcdef-0001", "one")
        _insert_raw(store, "abcdef-0002", "two")
        output, ok = run_command("key-show abcdef")
        assert not ok
        assert "Ambiguous id prefix 'abcdef'" in output


class TestKeyUpdate:
    def test_overlays_supplied_fields(self, keys_commands, store, added_id):
        output, ok = run_command(f"key-update {added_id} value=sk-NEWVALUE9999 notes=hello")
        assert ok, output
        (stored,) = store.list_all()
        assert stored.value == "sk-NEWVALUE9999"
        assert stored.masked_value == "sk-...9999"
        assert stored.notes == "hello"
        assert stored.name == "OpenAI"
        assert stored.tags == "prod,llm"

    def test_empty_value_clears_optional(self, keys_commands, store, added_id):
        run_command(f"edit {added_id} tags=")
        assert store.list_all()[0].tags is None

    def test_required_field_cannot_be_blank(self, keys_commands, store, added_id):
        output, ok = run_command(f"key-update {added_id} name=")
        assert not ok
        assert output == "[error] 'name' cannot be empty."
        assert store.list_all()[0].name == "OpenAI"

    def test_nothing_to_update(self, keys_commands, added_id):
        assert run_command(f"key-update {added_id}") == ("[error] Nothing to update.", False)

    def test_created_at_survives(self, keys_commands, store, added_id):
        before = store.get(added_id)
        run_command(f"key-update {added_id} vendor=OpenAI-EU")
        after = store.get(added_id)
        assert after.created_at == before.created_at
        assert after.vendor == "OpenAI-EU"


class TestKeyDelete:
    def test_delete_by_prefix(self, keys_commands, store, added_id):
        output, ok = run_command(f"rm {added_id[:8]}")
        assert ok
        assert output == f"Deleted {added_id}"
        assert store.list_all() == []

    def test_unknown_id_is_silent(self, keys_commands, store, added_id):
        output, ok = run_command("key-delete not-a-real-id")
        assert ok
        assert [k.id for k in store.list_all()] == [added_id]


class TestUnboundStore:
    @pytest.mark.parametrize("line", ["key-list", "key-add n v sk-ABCDEFGHIJKL",
                                      "key-show abcdef", "key-delete abcdef"])
    def test_reports_not_initialized(self, keys_commands, line):
        keys_commands.bind_store(None)
        assert run_command(line) == ("[error] Database is not initialized", False)

    def test_completion_is_quiet(self, keys_commands):
        keys_commands.bind_store(None)
        assert suggest("key-show ") == []


class TestCompletion:
    def test_ids(self, keys_commands, added_id):
        assert suggest("key-show ") == [added_id]

    def test_vendor_values(self, keys_commands, added_id):
        assert suggest("key-list vendor=op") == ["vendor=OpenAI"]

    def test_tag_values(self, keys_commands, added_id):
        assert suggest("key-list tag=") == ["tag=llm", "tag=prod"]
