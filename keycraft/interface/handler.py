#!/usr/bin/env python3
# keycraft/interface/handler.py
from __future__ import annotations

"""
Command dispatch and help formatting.

Output convention: failures are returned as text starting with '[error]'.
Key store errors are shown with their message unchanged.
"""

import difflib
import logging

from keycraft.commands import REGISTRY, CommandResult
from keycraft.db.vault import KeyStoreError
from keycraft.ui import clear_screen, format_table
from .parser import bind_args, build_usage, tokenize

logger = logging.getLogger(__name__)

HELP_TEXT = "Type 'help <command>' for more information on a specific command."


def _suggest_similar_names(name: str) -> str:
    universe = REGISTRY.names() + ["help", "exit", "quit"]
    matches = difflib.get_close_matches(name, universe, n=3, cutoff=0.6)
    return f" Did you mean: {', '.join(matches)}?" if matches else ""


def list_categories() -> str:
    categories = REGISTRY.categories()
    if not categories:
        return "No commands loaded."

    rows = []
    for category_name in sorted(categories):
        count = len(categories[category_name])
        rows.append([
            category_name,
            f"{count} command{'s' if count != 1 else ''}",
            REGISTRY.get_category_description(category_name),
        ])
    return format_table(rows, headers=["Category", "Commands", "Description"])


def _format_category_help(category: str) -> str:
    commands_in_category = REGISTRY.categories().get(category)
    if not commands_in_category:
        return f"No such category: {category}"

    rows = []
    for command_obj in sorted(commands_in_category, key=lambda c: c.name.lower()):
        rows.append([
            command_obj.name,
            ", ".join(command_obj.aliases) or "-",
            command_obj.description,
        ])
    return format_table(rows, headers=["Command", "Aliases", "Description"])


def format_command_help(name: str) -> str:
    """Help for a command, or for a category when the name matches one."""
    command_obj = REGISTRY.get(name)
    if not command_obj:
        if name in REGISTRY.categories():
            return _format_category_help(name)
        if name == "all":
            return "\n".join(_format_category_help(c) for c in sorted(REGISTRY.categories()))
        return f"No such command or category: {name}"

    lines = [
        f"Name:        {command_obj.name}",
        f"Aliases:     {', '.join(command_obj.aliases) or '(none)'}",
        f"Category:    {command_obj.category}",
        f"Description: {command_obj.description or '(none)'}",
        f"Example:     {command_obj.example or '(none)'}",
        f"Usage:       {build_usage(command_obj.name, command_obj.callback)}",
    ]
    return "\n".join(lines)


def _is_success(output: str | None) -> bool:
    if output is None:
        return True
    return not output.lstrip().lower().startswith("[error]")


def run_command(input_line: str) -> tuple[str | None, bool]:
    """
    Run one command line. Returns (output, success).

    Raises:
        SystemExit: on 'exit' / 'quit'.
    """
    line = input_line.strip()
    if not line:
        return None, True

    lowered = line.lower()
    if lowered in {"exit", "quit"}:
        raise SystemExit(0)
    if lowered in {"clear", "cls"}:
        clear_screen()
        return None, True
    if lowered == "help":
        return list_categories(), True
    if lowered.startswith("help "):
        return format_command_help(line.partition(" ")[2].strip()), True

    try:
        command_name, *arg_tokens = tokenize(line)
    except ValueError as exc:
        return f"[error] {exc}", False

    command_obj = REGISTRY.get(command_name)
    if not command_obj:
        return (f"[error] Unknown command: {command_name}."
                f"{_suggest_similar_names(command_name)} {HELP_TEXT}"), False

    try:
        positional_args, keyword_args = bind_args(command_obj.callback, arg_tokens)
    except TypeError as exc:
        usage = build_usage(command_obj.name, command_obj.callback)
        return f"[error] {exc}\nUsage: {usage}", False

    try:
        result = command_obj.invoke(*positional_args, **keyword_args)
    except KeyStoreError as exc:
        logger.debug("%s failed: %s", command_obj.name, exc.to_dict())
        return f"[error] {exc}", False
    except (ValueError, LookupError) as exc:
        return f"[error] {exc}", False

    if isinstance(result, CommandResult):
        text = result.message or None
        if not result.ok and text and _is_success(text):
            text = f"[error] {text}"
        return text, result.ok
    text = None if result is None else str(result)
    return text, _is_success(text)


def handle_line(input_line: str) -> str | None:
    """
    Parse and execute one input line.

    Returns:
        None if nothing should be printed, else the text to print.
    """
    output, _ok = run_command(input_line)
    return output
