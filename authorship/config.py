"""Process-wide registry configuration

Holds the one validated AppConfig every component falls back to when it
is not handed its own section. The first access loads config/config.yaml;
tests override single values with set_config_value and drop overrides
with reset_config.

Usage:
    from authorship.config import get_validated_config, set_config_value

    reward = get_validated_config().registry.reward_amount
    set_config_value("registry.max_content_limit", 3)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config_schema import AppConfig, load_validated_config, validate_config_dict


_validated_config: AppConfig | None = None

DEFAULT_CONFIG_PATH: Path = Path(__file__).parent.parent / "config" / "config.yaml"


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load config/config.yaml (or config_path) and make it current.

    Also applies logging.level to the package's module loggers.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pydantic.ValidationError: If a section fails validation.
    """
    global _validated_config

    _validated_config = load_validated_config(config_path or DEFAULT_CONFIG_PATH)
    logging.getLogger("authorship").setLevel(_validated_config.logging.level)
    return _validated_config


def get_validated_config() -> AppConfig:
    """Current config, loading the default file on first use."""
    if _validated_config is None:
        return load_config()
    return _validated_config


def set_config_value(key: str, value: Any) -> AppConfig:
    """Override one dot-path value, e.g. "registry.reward_amount".

    The whole config is re-validated, so a bad value or an unknown key
    raises pydantic.ValidationError and leaves the current config alone.
    """
    global _validated_config

    raw = get_validated_config().model_dump()
    *parents, leaf = key.split(".")
    target = raw
    for part in parents:
        if not isinstance(target.get(part), dict):
            target[part] = {}
        target = target[part]
    target[leaf] = value

    _validated_config = validate_config_dict(raw)
    return _validated_config


def reset_config() -> None:
    """Forget the current config so the next access reloads from disk."""
    global _validated_config
    _validated_config = None
