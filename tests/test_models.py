"""Tests for keycraft.db.vault.models."""

import pytest

from keycraft.db.vault import ApiKey


class TestApiKey:
    def test_repr_hides_secret(self):
        key = ApiKey(name="OpenAI", vendor="OpenAI", value="sk-ABCDEFGHIJKL")
        assert "sk-ABCDEFGHIJKL" not in repr(key)

    def test_to_dict_has_every_field(self):
        payload = ApiKey(name="n", vendor="v", value="secret-value").to_dict()
        assert set(payload) == {
            "id", "name", "vendor", "value", "masked_value", "base_url",
            "doc_url", "code_snippets", "tags", "notes", "created_at", "updated_at",
        }
        assert payload["tags"] is None


class TestFromDict:
    def test_blank_optionals_become_none(self):
        key = ApiKey.from_dict({
            "name": "n", "vendor": "v", "value": "secret-value",
            "base_url": "", "tags": "a,b", "unknown": "ignored",
        })
        assert key.base_url is None
        assert key.tags == "a,b"
        assert key.id == ""

    def test_null_derived_fields_become_empty(self):
        key = ApiKey.from_dict({
            "name": "n", "vendor": "v", "value": "secret-value",
            "id": None, "created_at": None,
        })
        assert key.id == ""
        assert key.created_at == ""

    def test_missing_required_field(self):
        with pytest.raises(ValueError, match="vendor"):
            ApiKey.from_dict({"name": "n", "value": "secret-value"})

    def test_round_trip_through_dict(self):
        key = ApiKey(name="n", vendor="v", value="secret-value", notes="x",
                     id="abc", masked_value="sec...alue")
        assert ApiKey.from_dict(key.to_dict()) == key
