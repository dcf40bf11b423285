"""
Configuration utilities for the todoist CLI.

Values are resolved with the precedence

    command-line flag > environment variable > stored config file > default

The stored file lives at ``$XDG_CONFIG_HOME/todoist/config.json`` and uses the
keys ``endpoint``, ``apiToken``, ``timeout`` (milliseconds) and ``retries``.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, field_validator

from ..errors import ConfigError, UsageError

DEFAULT_ENDPOINT = "https://api.todoist.com"
DEFAULT_TIMEOUT_MS = 15000
DEFAULT_RETRIES = 2
MAX_RETRIES = 10

ALLOWED_KEYS = ("endpoint", "apiToken", "timeout", "retries")
NUMERIC_KEYS = ("timeout", "retries")
REDACTED = "***redacted***"

_SECRET_KEY_RE = re.compile(r"token|secret|api[_-]?key", re.IGNORECASE)


def load_env_vars() -> None:
    """
    Load environment variables from .env files in the following order:
    1. .todoist.env in the current directory
    2. .todoist.env in the user's home directory
    Variables already present in the environment win.
    """
    if os.path.exists(".todoist.env"):
        load_dotenv(".todoist.env")

    home_env = Path.home() / ".todoist.env"
    if home_env.exists():
        load_dotenv(home_env)


def _check_endpoint(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"endpoint must be an http(s) URL, got {value!r}")
    return value


class StoredConfig(BaseModel):
    """Partial configuration as written to the config file."""

    endpoint: Optional[str] = None
    api_token: Optional[str] = Field(None, alias="apiToken", min_length=1)
    timeout: Optional[PositiveInt] = None
    retries: Optional[int] = Field(None, ge=0, le=MAX_RETRIES)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, value: Optional[str]) -> Optional[str]:
        return _check_endpoint(value)

    def to_file_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class EffectiveConfig(BaseModel):
    """Fully resolved, read-only runtime configuration."""

    endpoint: str
    api_token: Optional[str] = Field(None, alias="apiToken", min_length=1)
    timeout: PositiveInt = DEFAULT_TIMEOUT_MS
    retries: int = Field(DEFAULT_RETRIES, ge=0, le=MAX_RETRIES)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, value: Optional[str]) -> Optional[str]:
        return _check_endpoint(value)


def first_validation_issue(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid value"
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


def resolve_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    config_root = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_root) / "todoist" / "config.json"


def load_stored_config(config_path: Optional[Path] = None) -> StoredConfig:
    """Read the config file; a missing file is an empty configuration."""
    config_path = config_path or resolve_config_path()
    if not config_path.exists():
        return StoredConfig()

    raw = config_path.read_text(encoding="utf-8")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        raise ConfigError(f"Config file is not valid JSON: {config_path}")

    try:
        return StoredConfig.model_validate(parsed)
    except ValidationError as exc:
        raise ConfigError(f"Config validation failed: {first_validation_issue(exc)}")


def save_stored_config(
    config: Union[StoredConfig, Mapping[str, Any]], config_path: Optional[Path] = None
) -> StoredConfig:
    config_path = config_path or resolve_config_path()
    try:
        validated = StoredConfig.model_validate(
            config.to_file_dict() if isinstance(config, StoredConfig) else dict(config)
        )
    except ValidationError as exc:
        raise ConfigError(f"Cannot save config: {first_validation_issue(exc)}")

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(validated.to_file_dict(), indent=2) + "\n", encoding="utf-8")
    return validated


def _pick(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def resolve_effective_config(
    stored: StoredConfig,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> EffectiveConfig:
    env = os.environ if env is None else env
    overrides = overrides or {}

    merged = {
        "endpoint": _pick(overrides.get("endpoint"), env.get("TODOIST_ENDPOINT"), stored.endpoint, DEFAULT_ENDPOINT),
        "api_token": _pick(env.get("TODOIST_API_TOKEN"), stored.api_token),
        "timeout": _pick(overrides.get("timeout"), env.get("TODOIST_TIMEOUT"), stored.timeout, DEFAULT_TIMEOUT_MS),
        "retries": _pick(overrides.get("retries"), env.get("TODOIST_RETRIES"), stored.retries, DEFAULT_RETRIES),
    }

    try:
        return EffectiveConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Effective config is invalid: {first_validation_issue(exc)}")


def load_effective_config(
    overrides: Optional[Mapping[str, Any]] = None, config_path: Optional[Path] = None
) -> EffectiveConfig:
    return resolve_effective_config(load_stored_config(config_path), overrides=overrides)


def redact_config(config: Union[StoredConfig, EffectiveConfig]) -> Dict[str, Any]:
    return {
        "endpoint": config.endpoint,
        "apiToken": REDACTED if config.api_token else None,
        "timeout": config.timeout,
        "retries": config.retries,
    }


def config_value(config: Union[StoredConfig, EffectiveConfig], key: str) -> Any:
    """Look up a config value by its file key (``apiToken`` etc.)."""
    return config.model_dump(by_alias=True).get(key)


def is_secret_key(key: str) -> bool:
    return bool(_SECRET_KEY_RE.search(key))


def ensure_allowed_key(key: str, context: str = "Unsupported key") -> None:
    if key not in ALLOWED_KEYS:
        raise UsageError(f"{context}: {key}")


def coerce_value(key: str, value: str) -> Union[str, int]:
    if key in NUMERIC_KEYS:
        try:
            return int(value)
        except ValueError:
            raise UsageError(f"Invalid numeric value for {key}: {value}")
    return value


def parse_set_assignments(inputs: Iterable[str]) -> Dict[str, str]:
    """Split ``key=value`` arguments; the value may itself contain ``=``."""
    result: Dict[str, str] = {}
    for item in inputs:
        key, sep, value = item.partition("=")
        if not sep or not key or not value:
            raise UsageError(f"Expected key=value format, got: {item}")
        result[key] = value
    return result
