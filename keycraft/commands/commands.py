#!/usr/bin/env python3
# keycraft/commands/commands.py
from __future__ import annotations

"""
Command registry and decorator utilities.

This module provides:
- CommandRegistry: in-memory registry of commands and aliases.
- command: decorator registering a function as a shell command.
"""

import inspect
from typing import Any, Callable, Dict, Mapping, Optional

from .command_types import Command, CompletionProvider


class CommandRegistry:
    """Holds all command definitions and provides lookup utilities."""

    def __init__(self) -> None:
        self._commands_by_name: Dict[str, Command] = {}
        self._alias_to_primary: Dict[str, str] = {}
        self._category_descriptions: Dict[str, str] = {}

    def _taken(self, key: str) -> bool:
        return key in self._commands_by_name or key in self._alias_to_primary

    def register(self, command_obj: Command) -> None:
        """Register a command and its aliases, rejecting any name collision."""
        primary_key = command_obj.name.lower()
        if self._taken(primary_key):
            raise ValueError(f"Command '{command_obj.name}' already registered.")

        alias_keys = [alias.lower() for alias in command_obj.aliases]
        for alias, alias_key in zip(command_obj.aliases, alias_keys):
            if self._taken(alias_key) or alias_key == primary_key or alias_keys.count(alias_key) > 1:
                raise ValueError(
                    f"Alias '{alias}' for '{command_obj.name}' collides with an existing name.")

        self._commands_by_name[primary_key] = command_obj
        for alias_key in alias_keys:
            self._alias_to_primary[alias_key] = primary_key

    def unregister(self, name: str) -> None:
        key = name.lower()
        command_obj = self._commands_by_name.pop(key, None)
        if command_obj is None:
            return
        for alias in command_obj.aliases:
            self._alias_to_primary.pop(alias.lower(), None)

    def clear(self) -> None:
        self._commands_by_name.clear()
        self._alias_to_primary.clear()
        self._category_descriptions.clear()

    # ---------------- Lookup ----------------

    def get(self, name: str) -> Optional[Command]:
        """Return the command by primary name or alias, or None if not found."""
        key = name.lower()
        if key in self._alias_to_primary:
            key = self._alias_to_primary[key]
        return self._commands_by_name.get(key)

    def all(self) -> list[Command]:
        """Primary commands only (no alias duplicates)."""
        return list(self._commands_by_name.values())

    def names(self) -> list[str]:
        """All primary names and aliases, for completion."""
        return [*self._commands_by_name.keys(), *self._alias_to_primary.keys()]

    # ---------------- Categories ----------------

    def categories(self) -> dict[str, list[Command]]:
        grouped: dict[str, list[Command]] = {}
        for cmd in self._commands_by_name.values():
            grouped.setdefault(cmd.category, []).append(cmd)
        return grouped

    def set_category_description(self, category: str, description: str) -> None:
        self._category_descriptions[category] = description.strip()

    def get_category_description(self, category: str) -> str:
        return self._category_descriptions.get(category, "")


# Global registry used across the app
REGISTRY = CommandRegistry()


def command(
    *,
    name: str | None = None,
    description: str | None = None,
    example: str | None = None,
    category: str | None = None,
    completers: Mapping[str, CompletionProvider] | None = None,
    aliases: list[str] | None = None,
    registry: CommandRegistry | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to register a function as a shell command.

    - `name` defaults to the function name in kebab-case.
    - `description` defaults to the first docstring line.
    """

    def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
        signature = inspect.signature(func)
        doc_line = (func.__doc__ or "").strip().splitlines()[:1]

        command_obj = Command(
            name=(name or func.__name__).replace("_", "-"),
            description=(description or (doc_line[0] if doc_line else "")).strip(),
            example=example or "",
            callback=func,
            module=func.__module__,
            category=category or "general",
            completers=dict(completers or {}),
            aliases=list(aliases or []),
            param_names=[p.name for p in signature.parameters.values()],
        )
        (registry or REGISTRY).register(command_obj)
        return func

    return wrapper
