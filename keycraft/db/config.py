#!/usr/bin/env python3
# keycraft/db/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) Files in CWD: .env, config.ini, config.json, config.toml
  3) Environment variables prefixed with KEYCRAFT_ (prefix stripped)

Validation:
  - DATA_PATH: normalized path (no creation here)
  - DB_FILENAME: plain file name, no directory parts
  - LOG_FILE_PATH: None or path (relative → under DATA_PATH)
  - LOG_LEVEL: one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - SHOW_BANNER / ENABLE_COMPLETION / REVEAL_SECRETS: bool
  - PROMPT: None or str
"""

from dataclasses import dataclass, field
from typing import Any, Mapping
from pathlib import Path
import configparser
import json
import os
import re
import tomllib

ENV_PREFIX = "KEYCRAFT_"

# ---------- defaults ----------


def default_data_path() -> str:
    """Per-user application data directory (not created here)."""
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or str(
            Path.home() / "AppData" / "Local")
        return str(Path(base) / "KeyCraft")
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return str(base / "keycraft")


DEFAULTS: dict[str, Any] = {
    "DATA_PATH": None,               # None -> default_data_path()
    "DB_FILENAME": "keycraft.db",
    "LOG_FILE_PATH": None,
    "LOG_LEVEL": "INFO",
    "PROMPT": None,
    "SHOW_BANNER": True,
    "ENABLE_COMPLETION": True,
    "REVEAL_SECRETS": False,
}


# ---------- data model ----------

@dataclass(frozen=True)
class AppConfig:
    data_path: Path
    db_filename: str
    log_file_path: Path | None

    log_level: str
    prompt: str | None
    show_banner: bool
    enable_completion: bool
    reveal_secrets: bool

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def db_path(self) -> Path:
        return self.data_path / self.db_filename

    @property
    def history_path(self) -> Path:
        return self.data_path / ".history"


# ---------- file loaders (stdlib) ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return out

    line_re = re.compile(r"""^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if (v.startswith("'") and v.endswith("'")) or (v.startswith('"') and v.endswith('"')):
            v = v[1:-1]
        out[_strip_prefix(k)] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser()
    try:
        cfg.read(path, encoding="utf-8")
    except configparser.Error:
        return {}
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return {}


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'log': {'level': 'DEBUG'}} -> {'LOG_LEVEL': 'DEBUG'}
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


def _find_config_files(base: Path | None = None) -> list[Path]:
    cwd = base or Path.cwd()
    return [
        cwd / ".env",
        cwd / "config.ini",
        cwd / "config.json",
        cwd / "config.toml",
    ]


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _strip_prefix(key: str) -> str:
    up = key.upper()
    return up[len(ENV_PREFIX):] if up.startswith(ENV_PREFIX) else up


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"Expected boolean, got: {val!r}")


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_log_level(val: Any) -> str:
    lv = _as_opt_str(val)
    if lv is None:
        return "INFO"
    up = lv.upper()
    if up not in _LOG_LEVELS:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {lv!r}")
    return up


def _as_path(val: Any) -> Path:
    # expand both ~ and env vars
    s = os.path.expandvars(os.path.expanduser(str(val)))
    return Path(s).resolve()


def _resolve_under(base: Path, value: Any) -> Path | None:
    """Resolve a config path relative to `base` (data dir) when not absolute."""
    v = _as_opt_str(value)
    if v is None:
        return None
    p = Path(os.path.expandvars(os.path.expanduser(v)))
    return p if p.is_absolute() else (base / p).resolve()


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {_strip_prefix(str(k)): v for k, v in d.items()}


# ---------- merge & load ----------

def _merge_sources(
    base: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    for file in _find_config_files(base):
        if file.name == ".env":
            merged.update(_load_env_file(file))
        elif file.suffix == ".ini":
            merged.update(_normalize_keys(_load_ini_file(file)))
        elif file.suffix == ".json":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_json_file(file))))
        elif file.suffix == ".toml":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_toml_file(file))))

    # Environment variables override all; only KEYCRAFT_-prefixed keys
    env = os.environ if environ is None else environ
    merged.update({k[len(ENV_PREFIX):]: v for k, v in env.items()
                   if k.startswith(ENV_PREFIX) and len(k) > len(ENV_PREFIX)})
    return merged


# ---------- validation ----------

def _validate_and_build(config: Mapping[str, Any]) -> AppConfig:
    data_raw = _as_opt_str(config.get("DATA_PATH")) or default_data_path()
    data_path = _as_path(data_raw)

    db_filename = _as_opt_str(config.get("DB_FILENAME")) or DEFAULTS["DB_FILENAME"]
    if Path(db_filename).name != db_filename:
        raise ValueError(
            f"DB_FILENAME must be a bare file name, got {db_filename!r}")

    log_file_path = _resolve_under(data_path, config.get("LOG_FILE_PATH"))

    log_level = _as_log_level(config.get("LOG_LEVEL", DEFAULTS["LOG_LEVEL"]))
    prompt = _as_opt_str(config.get("PROMPT", DEFAULTS["PROMPT"]))
    show_banner = _as_bool(config.get("SHOW_BANNER", DEFAULTS["SHOW_BANNER"]))
    enable_completion = _as_bool(config.get(
        "ENABLE_COMPLETION", DEFAULTS["ENABLE_COMPLETION"]))
    reveal_secrets = _as_bool(config.get(
        "REVEAL_SECRETS", DEFAULTS["REVEAL_SECRETS"]))

    recognized = set(DEFAULTS.keys())
    extra = {k: v for k, v in config.items() if k not in recognized}

    return AppConfig(
        data_path=data_path,
        db_filename=db_filename,
        log_file_path=log_file_path,
        log_level=log_level,
        prompt=prompt,
        show_banner=show_banner,
        enable_completion=enable_completion,
        reveal_secrets=reveal_secrets,
        extra=extra,
    )


# ---------- public API ----------

def load_config(
    *,
    base: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Load, merge, normalize, and validate configuration.
    No filesystem side-effects (no directory creation).

    Raises:
        ValueError: a setting has an invalid value.
    """
    return _validate_and_build(_merge_sources(base, environ))
