#!/usr/bin/env python3
# keycraft/interface/completion.py
from __future__ import annotations

"""
Command line completion utilities.

Suggestions for:
- First token: built-in commands + all registered command names and aliases.
- 'help <partial>': categories and command names.
- Later tokens: parameter keys ('key=') and values from per-command providers.
"""

import shlex

from keycraft.commands import REGISTRY

BUILT_IN_COMMANDS: tuple[str, ...] = ("help", "exit", "quit", "clear", "cls")


def _split_current_token(raw_input: str) -> tuple[list[str], str]:
    """
    Return (parts, current_prefix).

    A trailing space starts a new (empty) token. Unbalanced quotes fall back
    to whitespace splitting.
    """
    if not raw_input:
        return [], ""
    try:
        parts = shlex.split(raw_input, posix=True)
    except ValueError:
        parts = raw_input.split()
    if raw_input[-1].isspace():
        parts.append("")
    return parts, (parts[-1] if parts else "")


def suggest(text_before_cursor: str) -> list[str]:
    """Produce suggestions for the current buffer content."""
    parts, current_prefix = _split_current_token(text_before_cursor.lstrip())

    if len(parts) <= 1:
        universe = [*BUILT_IN_COMMANDS, *REGISTRY.names()]
        return sorted(w for w in universe if w.startswith(current_prefix))

    if parts[0] == "help":
        universe = set(REGISTRY.categories()) | set(REGISTRY.names())
        return sorted(w for w in universe if w.startswith(parts[1]))

    command_obj = REGISTRY.get(parts[0])
    if not command_obj:
        return []

    argument_tokens = parts[1:]
    current_token = argument_tokens[-1]
    key, sep, value_prefix = current_token.partition("=")

    if sep and key in command_obj.param_names:
        provider = command_obj.completers.get(key)
        if not provider:
            return []
        return [f"{key}={value}" for value in provider(text=value_prefix)]

    suggestions: list[str] = []
    if current_token:
        suggestions.extend(
            f"{name}=" for name in sorted(command_obj.param_names)
            if f"{name}=".startswith(current_token))

    positional_only = [t for t in argument_tokens if "=" not in t]
    position_index = max(0, len(positional_only) - 1)
    provider = command_obj.completers.get(f"pos{position_index}")
    if provider:
        suggestions.extend(provider(text=current_token))
    return suggestions
