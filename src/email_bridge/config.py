"""Configuration for the email command bridge.

Values are resolved once, at the edge (CLI or host application), and passed
explicitly to the router and invoker.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_SKILL_PATH = Path("/usr/lib/node_modules/openclaw/skills/zoho-email")
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_EXECUTABLE = "python3"
CONFIG_TABLE = "email"


class ConfigError(ValueError):
    """Raised when the bridge configuration is invalid."""


@dataclass(frozen=True, slots=True)
class EmailBridgeConfig:
    script_base_dir: Path = DEFAULT_SKILL_PATH
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    verbose: bool = False
    token_file: Path | None = None
    executable: str = DEFAULT_EXECUTABLE


def _expand_path(s: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(s)))


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _optional_str(table: dict[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{CONFIG_TABLE}.{key} must be a non-empty string")
    return value.strip()


def config_from_table(table: dict[str, Any]) -> EmailBridgeConfig:
    """Build a config from an already-parsed `[email]` table."""
    if not isinstance(table, dict):
        raise ConfigError(f"{CONFIG_TABLE} must be a table")

    skill_path = _optional_str(table, "skill_path")
    token_file = _optional_str(table, "token_file")
    executable = _optional_str(table, "executable") or DEFAULT_EXECUTABLE

    timeout_ms = table.get("timeout_ms", DEFAULT_TIMEOUT_MS)
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int):
        raise ConfigError(f"{CONFIG_TABLE}.timeout_ms must be an integer")
    if timeout_ms <= 0:
        raise ConfigError(f"{CONFIG_TABLE}.timeout_ms must be positive")

    verbose = table.get("verbose", False)
    if not isinstance(verbose, bool):
        raise ConfigError(f"{CONFIG_TABLE}.verbose must be a boolean")

    return EmailBridgeConfig(
        script_base_dir=_expand_path(skill_path) if skill_path else DEFAULT_SKILL_PATH,
        default_timeout_ms=timeout_ms,
        verbose=verbose,
        token_file=_expand_path(token_file) if token_file else None,
        executable=executable,
    )


def load_email_config(path: str | os.PathLike[str]) -> EmailBridgeConfig:
    data = _load_toml(_expand_path(os.fspath(path)))
    return config_from_table(data.get(CONFIG_TABLE, {}))
