# keycraft/plugins/keys/__init__.py
"""API key management commands."""

CATEGORY_DESCRIPTION = "Store, list, inspect, update and delete API keys."
