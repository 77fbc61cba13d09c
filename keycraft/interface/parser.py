#!/usr/bin/env python3
# keycraft/interface/parser.py
from __future__ import annotations

"""
Argument parsing helpers for commands.

Responsibilities:
- Tokenize a command line into shell-like tokens.
- Bind tokens to a callable signature with type coercion based on annotations.
- Render compact Usage strings from a function signature.
"""

import inspect
import shlex
import types
from typing import Any, Union, get_args, get_origin

_TRUE = ("1", "true", "yes", "y", "on")
_FALSE = ("0", "false", "no", "n", "off")


def tokenize(command_line: str) -> list[str]:
    """Split a raw command line into tokens using POSIX rules."""
    return shlex.split(command_line, posix=True)


def _signature(func: Any) -> inspect.Signature:
    # command modules use `from __future__ import annotations`
    try:
        return inspect.signature(func, eval_str=True)
    except (NameError, TypeError):
        return inspect.signature(func)


def _unwrap_optional(annotation: Any) -> Any:
    """`X | None` / Optional[X] -> X."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _coerce_value(text_value: str, annotation: Any) -> Any:
    """
    Convert a string to the annotated type when reasonable.

    Supported coercions:
        - str/Any/unannotated -> text unchanged
        - bool -> '1,true,yes,y,on' / '0,false,no,n,off' (case-insensitive)
        - int/float -> cast via constructor
    """
    annotation = _unwrap_optional(annotation)
    if annotation in (inspect.Parameter.empty, str, Any):
        return text_value
    if annotation is bool:
        lowered = text_value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise TypeError(f"Expected a boolean, got {text_value!r}")
    if annotation in (int, float):
        try:
            return annotation(text_value)
        except ValueError as exc:
            raise TypeError(
                f"Expected {annotation.__name__}, got {text_value!r}") from exc
    return text_value


def bind_args(func: Any, tokens: list[str]) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """
    Bind a flat token list to the signature of `func`.

    Supports:
        - positional tokens
        - key=value tokens for keyword-only or normal parameters; a token whose
          key is not a parameter name stays positional
        - *args (VAR_POSITIONAL), elements kept as text

    Raises:
        TypeError: missing or surplus arguments, or a failed coercion.
    """
    parameters = list(_signature(func).parameters.values())
    by_name = {p.name: p for p in parameters}

    positional_tokens: list[str] = []
    kw_tokens: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        # secrets may contain '=', so only known parameter names count as keys
        if sep and key in by_name and by_name[key].kind not in (
                inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.POSITIONAL_ONLY):
            kw_tokens[key] = value
        else:
            positional_tokens.append(token)

    bound_positional: list[Any] = []
    bound_keywords: dict[str, Any] = {}
    positional_index = 0
    has_var_positional = False

    for parameter in parameters:
        if parameter.kind is parameter.VAR_POSITIONAL:
            has_var_positional = True
            bound_positional.extend(positional_tokens[positional_index:])
            positional_index = len(positional_tokens)
            continue

        if parameter.name in kw_tokens:
            bound_keywords[parameter.name] = _coerce_value(
                kw_tokens[parameter.name], parameter.annotation)
            continue

        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            if positional_index < len(positional_tokens):
                value = _coerce_value(
                    positional_tokens[positional_index], parameter.annotation)
                positional_index += 1
                if parameter.kind is parameter.POSITIONAL_ONLY:
                    bound_positional.append(value)
                else:
                    bound_keywords[parameter.name] = value
            elif parameter.default is inspect.Parameter.empty:
                raise TypeError(f"Missing required argument: {parameter.name}")
        elif parameter.kind is parameter.KEYWORD_ONLY:
            if parameter.default is inspect.Parameter.empty:
                raise TypeError(
                    f"Missing required keyword-only argument: {parameter.name}")

    if not has_var_positional and positional_index < len(positional_tokens):
        raise TypeError("Too many positional arguments.")

    return tuple(bound_positional), bound_keywords


def build_usage(command_name: str, func: Any) -> str:
    """
    Render a compact usage string based on `func` signature.

    Example:
        'key-add <name> <vendor> <value> [base_url=...] [tags=...]'
    """
    usage_parts: list[str] = []
    for parameter in _signature(func).parameters.values():
        if parameter.kind is parameter.VAR_POSITIONAL:
            usage_parts.append("[args...]")
        elif parameter.kind is parameter.KEYWORD_ONLY:
            usage_parts.append(f"[{parameter.name}=...]")
        elif parameter.default is inspect.Parameter.empty:
            usage_parts.append(f"<{parameter.name}>")
        else:
            usage_parts.append(f"[{parameter.name}]")

    return f"{command_name} " + " ".join(usage_parts) if usage_parts else command_name
