"""Configuration file loading and CLI overrides for runtime tunables.

Precedence, lowest to highest: built-in defaults, environment, config file,
CLI flags.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(value)
    return bool(value)


# config key -> (Constants attribute, converter)
_TUNABLES = {
    "git_binary": ("GIT_BINARY", str),
    "git_timeout": ("GIT_TIMEOUT_SEC", int),
    "cache_ttl": ("VERSION_CACHE_TTL_SEC", int),
    "default_constraint_from_lock": ("DEFAULT_CONSTRAINT_FROM_LOCK", _to_bool),
    "github_api": ("GITHUB_API_ENABLED", _to_bool),
    "github_api_base": ("GITHUB_API_BASE", str),
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "http_retries": ("HTTP_RETRY_MAX", int),
}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or has the wrong shape."""


def load_config(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file.

    Returns the ``depimport:`` section when present, else the whole mapping.

    Raises:
        ConfigError: if the file is unreadable or not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot parse config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    section = data.get(Constants.CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{Constants.CONFIG_SECTION}' section of {path} must be a mapping")
    return section


def apply_config(config: Dict[str, Any]) -> None:
    """Overlay known configuration keys onto Constants; unknown keys are logged and skipped."""
    for key, value in config.items():
        target = _TUNABLES.get(key)
        if target is None:
            logger.warning("Ignoring unknown configuration key: %s", key)
            continue
        attr, convert = target
        try:
            setattr(Constants, attr, convert(value))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid value for '{key}': {value!r}") from exc


def apply_cli_overrides(args) -> None:
    """Apply CLI flags, which take precedence over the config file."""
    if getattr(args, "GIT_TIMEOUT", None) is not None:
        Constants.GIT_TIMEOUT_SEC = int(args.GIT_TIMEOUT)
    if getattr(args, "GITHUB_API", None):
        Constants.GITHUB_API_ENABLED = True
    if getattr(args, "DEFAULT_CONSTRAINT_FROM_LOCK", None) is not None:
        Constants.DEFAULT_CONSTRAINT_FROM_LOCK = bool(args.DEFAULT_CONSTRAINT_FROM_LOCK)


def configure(args, config_path: Optional[str] = None) -> None:
    """Load the config file (if any) and then apply CLI overrides."""
    path = config_path or getattr(args, "CONFIG", None)
    if path:
        apply_config(load_config(path))
    apply_cli_overrides(args)
