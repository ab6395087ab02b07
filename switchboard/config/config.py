#!/usr/bin/env python3
# switchboard/config/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) Files in CWD: .env, config.ini, config.json, config.toml
  3) Environment variables (KEY or SWITCHBOARD_KEY)

Validation:
  - PLUGIN_PACKAGE: dotted Python package name
  - AUTOLOAD: comma-separated module names
  - LOG_FILE_PATH / HISTORY_FILE_PATH: None or normalized path
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - PROMPT: None or str
  - ENABLE_COMPLETION / SHOW_BANNER: bool
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
import configparser
import json
import os
import re
import tomllib

ENV_PREFIX = "SWITCHBOARD_"

# ---------- defaults ----------

DEFAULTS: dict[str, Any] = {
    "PLUGIN_PACKAGE": "plugins",
    "AUTOLOAD": "",
    "LOG_FILE_PATH": None,
    "LOG_LEVEL": None,              # 'DEBUG'/'INFO'/'WARNING'/'ERROR'/'CRITICAL'
    "PROMPT": None,
    "ENABLE_COMPLETION": True,
    "HISTORY_FILE_PATH": str(Path.home() / ".switchboard_history"),
    "SHOW_BANNER": True,
}


# ---------- data model ----------

@dataclass(frozen=True)
class AppConfig:
    plugin_package: str
    autoload: tuple[str, ...]
    log_file_path: Path | None
    log_level: str | None
    prompt: str | None
    enable_completion: bool
    history_file_path: Path | None
    show_banner: bool

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders (stdlib) ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return out

    line_re = re.compile(r"""^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
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
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser()
    if not cfg.read(path, encoding="utf-8"):
        return {}
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return {}


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'log': {'level': 'debug'}} -> {'LOG_LEVEL': 'debug'}
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


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    if up not in _LOG_LEVELS:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {lv!r}")
    return up


def _as_opt_path(val: Any) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    # expand both ~ and env vars
    return Path(os.path.expandvars(os.path.expanduser(v))).resolve()


def _as_package(val: Any) -> str:
    s = str(val).strip()
    if not s or not all(part.isidentifier() for part in s.split(".")):
        raise ValueError(f"PLUGIN_PACKAGE must be a dotted package name, got {val!r}")
    return s


def _as_module_list(val: Any) -> tuple[str, ...]:
    if isinstance(val, (list, tuple)):
        items = [str(v).strip() for v in val]
    else:
        items = [part.strip() for part in str(val or "").split(",")]
    names = tuple(item for item in items if item)
    for name in names:
        if not name.isidentifier():
            raise ValueError(f"AUTOLOAD entries must be module names, got {name!r}")
    return names


# ---------- merge & load ----------

def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).upper(): v for k, v in d.items()}


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Recognized keys from the environment; the prefixed spelling wins."""
    out: dict[str, Any] = {}
    for key in DEFAULTS:
        if key in environ:
            out[key] = environ[key]
    for key, value in environ.items():
        if key.startswith(ENV_PREFIX) and re.fullmatch(r"[A-Z0-9_]+", key):
            out[key[len(ENV_PREFIX):]] = value
    return out


def _merge_sources(base: Path | None = None, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    for file in _find_config_files(base):
        if file.name == ".env":
            merged.update(_normalize_keys(_load_env_file(file)))
        elif file.suffix == ".ini":
            merged.update(_normalize_keys(_load_ini_file(file)))
        elif file.suffix == ".json":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_json_file(file))))
        elif file.suffix == ".toml":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_toml_file(file))))

    # Environment variables override all
    merged.update(_env_overrides(os.environ if environ is None else environ))
    return merged


# ---------- validation ----------

def _validate_and_build(config: dict[str, Any]) -> AppConfig:
    recognized = set(DEFAULTS.keys())
    extra = {k: v for k, v in config.items() if k not in recognized}

    return AppConfig(
        plugin_package=_as_package(config.get("PLUGIN_PACKAGE", DEFAULTS["PLUGIN_PACKAGE"])),
        autoload=_as_module_list(config.get("AUTOLOAD", DEFAULTS["AUTOLOAD"])),
        log_file_path=_as_opt_path(config.get("LOG_FILE_PATH", DEFAULTS["LOG_FILE_PATH"])),
        log_level=_as_log_level(config.get("LOG_LEVEL", DEFAULTS["LOG_LEVEL"])),
        prompt=_as_opt_str(config.get("PROMPT", DEFAULTS["PROMPT"])),
        enable_completion=_as_bool(config.get("ENABLE_COMPLETION", DEFAULTS["ENABLE_COMPLETION"])),
        history_file_path=_as_opt_path(config.get("HISTORY_FILE_PATH", DEFAULTS["HISTORY_FILE_PATH"])),
        show_banner=_as_bool(config.get("SHOW_BANNER", DEFAULTS["SHOW_BANNER"])),
        extra=extra,
    )


# ---------- public API ----------

def load_config(base: Path | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """
    Load, merge, normalize, and validate configuration.
    No filesystem side-effects. Raises ValueError on invalid values.
    """
    return _validate_and_build(_merge_sources(base, environ))
