"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from authorship.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# REGISTRY MODEL
# =============================================================================

class RegistryConfig(StrictModel):
    """Content registry defaults.

    reward_amount and max_content_limit are only the starting values;
    the owner can change both at runtime.
    """

    account_id: str = Field(
        default="authorship_registry",
        min_length=1,
        description="Principal ID the registry holds its reward pool under"
    )
    reward_amount: int = Field(
        default=100,
        ge=0,
        description="Tokens paid to the author of each new registration"
    )
    max_content_limit: int = Field(
        default=10,
        ge=0,
        description="Maximum live records a single creator may register"
    )
    update_approval_policy: Literal["preserve", "reset"] = Field(
        default="preserve",
        description="Whether update_content keeps an Approved status or resets it to Pending"
    )


# =============================================================================
# TOKEN MODEL
# =============================================================================

class TokenConfig(StrictModel):
    """Reward token ledger configuration."""

    name: str = Field(default="RewardToken", description="Token display name")
    symbol: str = Field(default="RWD", description="Token ticker")
    decimals: int = Field(default=18, ge=0, le=36, description="Display decimals")
    initial_supply: int = Field(
        default=1_000_000,
        ge=0,
        description="Tokens minted to the owner at deployment"
    )
    registry_funding: int = Field(
        default=100_000,
        ge=0,
        description="Tokens the owner moves into the registry reward pool at deployment"
    )

    @model_validator(mode="after")
    def funding_within_supply(self) -> "TokenConfig":
        """The owner cannot fund the registry with more than was minted."""
        if self.registry_funding > self.initial_supply:
            raise ValueError(
                f"registry_funding ({self.registry_funding}) exceeds "
                f"initial_supply ({self.initial_supply})"
            )
        return self


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Event log configuration."""

    output_file: str | None = Field(
        default=None,
        description="JSONL file for events (None keeps events in memory only)"
    )
    default_recent: int = Field(default=50, ge=1, description="Default count for read_recent")
    buffer_size: int = Field(default=1000, ge=1, description="Events kept in memory")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the package's module loggers"
    )


# =============================================================================
# METHOD SURFACE MODEL
# =============================================================================

class MethodConfig(StrictModel):
    """Configuration for an invokable registry method."""

    description: str = Field(default="", description="Method description for callers")


class ServiceMethodsConfig(StrictModel):
    """Descriptions for each invokable method."""

    register_content: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Register content by hash. Args: [content_hash]. Pays the reward."
        )
    )
    update_content: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Move your content to a new hash. Args: [old_hash, new_hash]"
        )
    )
    approve_content: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Approve registered content (admin only). Args: [content_hash]"
        )
    )
    get_content: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Look up a content record. Args: [content_hash]"
        )
    )
    add_creator: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Grant the creator role (owner only). Args: [principal]"
        )
    )
    assign_admin_role: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Grant the admin role (owner only). Args: [principal]"
        )
    )
    has_role: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Check a role. Args: [principal, role]"
        )
    )
    set_reward_amount: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Set the registration reward (owner only). Args: [amount]"
        )
    )
    set_max_content_limit: MethodConfig = Field(
        default_factory=lambda: MethodConfig(
            description="Set the per-creator content limit (owner only). Args: [limit]"
        )
    )


class ServiceConfig(StrictModel):
    """Method surface configuration."""

    id: str = Field(default="authorship_registry", description="Service ID")
    description: str = Field(
        default="Content authorship registry with token rewards",
        description="Service description"
    )
    methods: ServiceMethodsConfig = Field(default_factory=ServiceMethodsConfig)


# =============================================================================
# ROOT CONFIG
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    token: TokenConfig = Field(default_factory=TokenConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)


def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Args:
        config_dict: Configuration as a dictionary.

    Returns:
        Validated AppConfig instance.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    # Root config
    "AppConfig",
    # Sub-configs
    "RegistryConfig",
    "TokenConfig",
    "LoggingConfig",
    "ServiceConfig",
    "ServiceMethodsConfig",
    "MethodConfig",
    "StrictModel",
    # Functions
    "load_validated_config",
    "validate_config_dict",
]
