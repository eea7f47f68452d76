#!/usr/bin/env python3
# shellcore/config.py
from __future__ import annotations

"""
Configuration loader (stdlib only).

Precedence (low -> high):
  1) Built-in defaults
  2) Files in CWD: .env, shellcore.json, shellcore.toml
  3) Environment variables prefixed with SHELLCORE_

Validation:
  - PS1 / PS2: str (printf-style templates rendered against the session env)
  - LOG_LEVEL: one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - LOG_FILE_PATH: None or normalized path
  - ENABLE_COMPLETION: bool
  - HISTORY_SIZE: int >= 1
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional
import json
import os
import tomllib

from shellcore.exceptions import ConfigError

ENV_PREFIX = "SHELLCORE_"

DEFAULTS: dict[str, Any] = {
    "PS1": "> ",
    "PS2": "> ",
    "LOG_LEVEL": "WARNING",
    "LOG_FILE_PATH": None,
    "ENABLE_COMPLETION": True,
    "HISTORY_SIZE": 500,
}

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ShellConfig:
    ps1: str = DEFAULTS["PS1"]
    ps2: str = DEFAULTS["PS2"]
    log_level: str = DEFAULTS["LOG_LEVEL"]
    log_file_path: Optional[Path] = None
    enable_completion: bool = True
    history_size: int = DEFAULTS["HISTORY_SIZE"]

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines; blank lines and '#' comments are skipped."""
    out: dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        out[key.strip()] = value.strip().strip('"').strip("'")
    return out


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name}: top level must be an object")
    return data


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path.name}: {exc}") from exc


def _find_config_files(cwd: Path) -> list[Path]:
    candidates = [cwd / ".env", cwd / "shellcore.json", cwd / "shellcore.toml"]
    return [p for p in candidates if p.is_file()]


# ---------- coercions ----------

def _as_bool(key: str, val: Any) -> bool:
    if isinstance(val, bool):
        return val
    lowered = str(val).strip().lower()
    if lowered in ("1", "true", "yes", "y", "on"):
        return True
    if lowered in ("0", "false", "no", "n", "off", ""):
        return False
    raise ConfigError(f"{key} must be a boolean, got {val!r}")


def _as_int(key: str, val: Any) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {val!r}") from None


def _as_log_level(val: Any) -> str:
    level = str(val).strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {val!r}")
    return level


def _as_opt_path(val: Any) -> Optional[Path]:
    if val is None or str(val).strip() == "":
        return None
    return Path(os.path.expandvars(os.path.expanduser(str(val)))).resolve()


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).upper(): v for k, v in d.items()}


# ---------- merge & load ----------

def _merge_sources(cwd: Path, environ: Mapping[str, str]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    for file in _find_config_files(cwd):
        if file.name == ".env":
            values = {k[len(ENV_PREFIX):]: v for k, v in _load_env_file(file).items()
                      if k.upper().startswith(ENV_PREFIX)}
            merged.update(_normalize_keys(values))
        elif file.suffix == ".json":
            merged.update(_normalize_keys(_load_json_file(file)))
        elif file.suffix == ".toml":
            merged.update(_normalize_keys(_load_toml_file(file)))

    # Environment variables override all
    merged.update({k[len(ENV_PREFIX):].upper(): v for k, v in environ.items()
                   if k.startswith(ENV_PREFIX)})
    return merged


def _validate_and_build(config: dict[str, Any]) -> ShellConfig:
    history_size = _as_int("HISTORY_SIZE", config["HISTORY_SIZE"])
    if history_size < 1:
        raise ConfigError("HISTORY_SIZE must be >= 1")

    return ShellConfig(
        ps1=str(config["PS1"]),
        ps2=str(config["PS2"]),
        log_level=_as_log_level(config["LOG_LEVEL"]),
        log_file_path=_as_opt_path(config["LOG_FILE_PATH"]),
        enable_completion=_as_bool("ENABLE_COMPLETION", config["ENABLE_COMPLETION"]),
        history_size=history_size,
        extra={k: v for k, v in config.items() if k not in DEFAULTS},
    )


def load_config(cwd: Optional[Path] = None,
                environ: Optional[Mapping[str, str]] = None) -> ShellConfig:
    """
    Load, merge, normalize, and validate configuration.
    No filesystem side-effects.
    """
    raw = _merge_sources(cwd or Path.cwd(), os.environ if environ is None else environ)
    return _validate_and_build(raw)
