"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. Settings field defaults
#   2. config/config.yaml  (static defaults checked into the repo)
#   3. .env file / environment variables  (per-deployment overrides)
#
# load_config() returns the merged nested dict; load_settings() turns the
# same layers into a validated Settings object for building the engine.
#
# The _deep_merge helper does recursive dict merging:
#   base = {"review": {"auto_approval_threshold": 85}}
#   overrides = {"review": {"bulk_concurrency": 3}}
#   result = {"review": {"auto_approval_threshold": 85, "bulk_concurrency": 3}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml

from src.config.settings import Settings
from src.utils.errors import InputValidationError

# Settings fields configurable from the YAML "review" section.
_REVIEW_FIELDS = (
    "auto_approval_threshold",
    "auto_approval_enabled",
    "preview_max_chars",
    "words_per_minute",
    "bulk_concurrency",
    "bulk_backoff_seconds",
    "max_bulk_items",
    "health_warning_pending",
    "health_critical_pending",
)


def _read_yaml(path: str) -> dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        return {}
    with open(config_path) as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise InputValidationError(f"Config file {path} must contain a mapping")
    return loaded


def load_config(path: str = "config/config.yaml") -> dict:
    """Load YAML config and merge with environment-based Settings.

    Only values actually set in the environment (or ``.env``) override the
    YAML file; unset fields keep whatever the YAML says.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Fully resolved configuration dictionary.
    """
    yaml_config = _read_yaml(path)

    settings = Settings()
    explicit = settings.model_fields_set
    env_overrides: dict[str, Any] = {
        "review": {
            name: getattr(settings, name) for name in _REVIEW_FIELDS if name in explicit
        },
        "app": {"env": settings.app_env} if "app_env" in explicit else {},
        "logging": {"level": settings.log_level} if "log_level" in explicit else {},
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def load_settings(path: str = "config/config.yaml") -> Settings:
    """Build validated Settings with precedence env > YAML > defaults."""
    config = load_config(path)
    values: dict[str, Any] = {
        name: value
        for name, value in (config.get("review") or {}).items()
        if name in _REVIEW_FIELDS
    }
    if "env" in (config.get("app") or {}):
        values["app_env"] = config["app"]["env"]
    if "level" in (config.get("logging") or {}):
        values["log_level"] = config["logging"]["level"]
    return Settings(**values)


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict (mutates base)."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
