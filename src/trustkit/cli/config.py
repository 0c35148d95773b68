"""Configuration helpers for the trustkit CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path.home() / ".trustkit" / "config.toml"
DEFAULT_STORE_DIR = str(Path.home() / ".trustkit" / "stores")
DEFAULT_KEYS_DIR = str(Path.home() / ".trustkit" / "keys")
STORE_DIR_ENV_VAR = "TRUSTKIT_STORE_DIR"
KEYS_DIR_ENV_VAR = "TRUSTKIT_KEYS_DIR"


@dataclass(frozen=True)
class CLIConfig:
    store_dir: str = DEFAULT_STORE_DIR
    keys_dir: str = DEFAULT_KEYS_DIR
    operator: str | None = None
    account: str | None = None


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def optional_name(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{field_name} must be a string")
    name = value.strip()
    if "/" in name or "\\" in name or name in {".", ".."}:
        raise ConfigError(f"{field_name} must be a name, not a path")
    return name or None


def _dir_setting(source: dict[str, Any], field_name: str, env_var: str, default: str) -> str:
    env_value = os.getenv(env_var)
    if env_value and env_value.strip():
        return env_value.strip()
    value = source.get(field_name, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{field_name} must be a non-empty string")
    return str(Path(value.strip()).expanduser())


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    source: dict[str, Any] = {}
    if config_path.exists():
        parsed = _load_toml(config_path)
        section = parsed.get("cli")
        if isinstance(section, dict):
            source = section
        elif section is None:
            source = parsed
        else:
            raise ConfigError("[cli] must be a table")

    return CLIConfig(
        store_dir=_dir_setting(source, "store_dir", STORE_DIR_ENV_VAR, DEFAULT_STORE_DIR),
        keys_dir=_dir_setting(source, "keys_dir", KEYS_DIR_ENV_VAR, DEFAULT_KEYS_DIR),
        operator=optional_name(source.get("operator"), "operator"),
        account=optional_name(source.get("account"), "account"),
    )
