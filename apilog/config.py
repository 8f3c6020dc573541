"""
Configuration.

Precedence, lowest first: defaults, the YAML file (.apilog.yml), action inputs
and APILOG_* environment variables, explicit overrides (CLI options).

Secrets are never stored as values. ``github_token`` and ``api_key`` hold
references of the form "env:VAR_NAME" and are resolved at use time, so the
config can be printed or logged safely.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_FILE = ".apilog.yml"
SECRET_PREFIX = "env:"

# config key -> environment variables, first match wins
_ENV_KEYS: dict[str, tuple[str, ...]] = {
    "spec_path": ("INPUT_SPEC_PATH", "INPUT_OPTIC_SPEC_PATH", "APILOG_SPEC_PATH"),
    "subscribers": ("INPUT_SUBSCRIBERS", "APILOG_SUBSCRIBERS"),
    "api_url": ("GITHUB_API_URL", "APILOG_API_URL"),
    "spec_service_url": ("INPUT_SPEC_SERVICE_URL", "APILOG_SPEC_SERVICE_URL"),
    "viewer_url": ("INPUT_VIEWER_URL", "APILOG_VIEWER_URL"),
    "project_name": ("INPUT_PROJECT_NAME", "APILOG_PROJECT_NAME"),
}

# secret key -> environment variables that may hold the value
_SECRET_ENV_KEYS: dict[str, tuple[str, ...]] = {
    "github_token": ("INPUT_GITHUB_TOKEN", "GITHUB_TOKEN"),
    "api_key": ("INPUT_API_KEY", "APILOG_API_KEY"),
}


@dataclass(frozen=True)
class ApilogConfig:
    spec_path: str = ".optic/api/specification.json"
    subscribers: tuple[str, ...] = field(default_factory=tuple)
    github_token: str = "env:GITHUB_TOKEN"  # secret reference
    api_url: str = "https://api.github.com"
    bot_login: str = "github-actions[bot]"
    spec_service_url: str | None = None
    viewer_url: str | None = None
    api_key: str = "env:APILOG_API_KEY"  # secret reference
    project_name: str = "API"
    timeout_s: float = 10.0

    def to_dict(self) -> dict[str, Any]:
        """Safe to print: secrets appear as references only."""
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        d["subscribers"] = list(self.subscribers)
        return d


def is_secret_ref(value: str) -> bool:
    return value.startswith(SECRET_PREFIX)


def resolve_secret(ref: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Resolve "env:VAR_NAME" to the variable's value (None when unset or empty)."""
    if not is_secret_ref(ref):
        return None
    environ = os.environ if environ is None else environ
    value = environ.get(ref[len(SECRET_PREFIX) :])
    return value or None


def _split_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        raise ConfigError(f"subscribers must be a list or comma-separated string, got {type(value).__name__}")
    return tuple(item.strip() for item in items if item and item.strip())


def _coerce(key: str, value: Any) -> Any:
    if key == "subscribers":
        return _split_list(value)
    if key == "timeout_s":
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"timeout_s must be a number, got {value!r}") from e
    if key in _SECRET_ENV_KEYS:
        value = str(value)
        if not is_secret_ref(value):
            raise ConfigError(f"{key} must be a secret reference like 'env:VAR_NAME', not a raw value")
        return value
    return None if value is None else str(value)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read the YAML config file. Unknown keys are rejected."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    known = {f.name for f in fields(ApilogConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return {key: _coerce(key, value) for key, value in data.items()}


def _from_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, names in _ENV_KEYS.items():
        for name in names:
            raw = environ.get(name)
            if raw:
                values[key] = _coerce(key, raw)
                break
    for key, names in _SECRET_ENV_KEYS.items():
        for name in names:
            if environ.get(name):
                values[key] = f"{SECRET_PREFIX}{name}"
                break
    return values


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ApilogConfig:
    """Build the effective configuration.

    Args:
        path: Explicit config file. When None, ./.apilog.yml is used if present.
        environ: Environment mapping (defaults to os.environ)
        overrides: Highest-precedence values; None values are ignored
    """
    environ = os.environ if environ is None else environ

    if path is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        path = default if default.exists() else None
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    values: dict[str, Any] = {}
    if path is not None:
        values.update(load_config_file(path))
    values.update(_from_env(environ))
    values.update({k: _coerce(k, v) for k, v in overrides.items() if v is not None})

    return replace(ApilogConfig(), **values)
