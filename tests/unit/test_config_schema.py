"""Tests for config schema validation and the global config loader."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from authorship import config as config_module
from authorship.config import (
    DEFAULT_CONFIG_PATH,
    get_validated_config,
    load_config,
    set_config_value,
)
from authorship.config_schema import (
    AppConfig,
    RegistryConfig,
    TokenConfig,
    load_validated_config,
    validate_config_dict,
)


class TestDefaults:
    """Defaults match a fresh deployment."""

    def test_registry_defaults(self) -> None:
        cfg = RegistryConfig()
        assert cfg.reward_amount == 100
        assert cfg.max_content_limit == 10
        assert cfg.update_approval_policy == "preserve"

    def test_token_defaults(self) -> None:
        cfg = TokenConfig()
        assert cfg.initial_supply == 1_000_000
        assert cfg.registry_funding == 100_000

    def test_empty_dict_is_valid(self) -> None:
        cfg = validate_config_dict({})
        assert cfg == AppConfig()

    def test_method_descriptions_populated(self) -> None:
        methods = AppConfig().service.methods
        assert "content_hash" in methods.register_content.description
        assert methods.set_max_content_limit.description


class TestValidation:
    """Typos and out-of-range values fail fast."""

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"registry": {"reward_ammount": 5}})

    def test_unknown_section_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"regsitry": {}})

    def test_negative_reward_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegistryConfig(reward_amount=-1)

    def test_unknown_approval_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegistryConfig(update_approval_policy="keep")

    def test_reset_policy_accepted(self) -> None:
        assert RegistryConfig(update_approval_policy="reset").update_approval_policy == "reset"

    def test_funding_above_supply_rejected(self) -> None:
        with pytest.raises(ValidationError, match="exceeds"):
            TokenConfig(initial_supply=10, registry_funding=11)

    def test_empty_account_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegistryConfig(account_id="")


class TestLoading:
    """Loading from YAML files."""

    def test_shipped_config_is_valid(self) -> None:
        cfg = load_validated_config(DEFAULT_CONFIG_PATH)
        assert cfg.registry.account_id == "authorship_registry"
        assert cfg.token.registry_funding == 100_000

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_validated_config(tmp_path / "nope.yaml")

    def test_load_custom_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("registry:\n  reward_amount: 250\n")

        load_config(str(path))

        assert get_validated_config().registry.reward_amount == 250
        assert get_validated_config().registry.max_content_limit == 10

    def test_invalid_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("token:\n  initial_supply: -5\n")

        with pytest.raises(ValidationError):
            load_config(str(path))


class TestRuntimeAccess:
    """Typed reads and dot-path overrides on the global config."""

    def test_first_access_loads_shipped_file(self) -> None:
        assert get_validated_config().token.symbol == "RWD"

    def test_load_config_returns_current(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("logging:\n  level: DEBUG\n")

        cfg = load_config(path)

        assert cfg is get_validated_config()
        assert logging.getLogger("authorship").level == logging.DEBUG

    def test_set_config_value_revalidates(self) -> None:
        cfg = set_config_value("registry.max_content_limit", 3)

        assert cfg.registry.max_content_limit == 3
        assert get_validated_config().registry.max_content_limit == 3
        assert get_validated_config().registry.reward_amount == 100

    def test_set_invalid_value_keeps_current(self) -> None:
        with pytest.raises(ValidationError):
            set_config_value("registry.update_approval_policy", "sometimes")
        assert get_validated_config().registry.update_approval_policy == "preserve"

    def test_set_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            set_config_value("registry.nonexistent", 1)

    def test_reset_between_tests(self) -> None:
        """The autouse fixture drops overrides from other tests."""
        assert config_module._validated_config is None
        assert get_validated_config().registry.max_content_limit == 10
