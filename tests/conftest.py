"""Pytest fixtures for authorship registry tests.

Common fixtures for building a token, a registry and a full deployment
with deterministic timestamps.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

from typing import Iterator

import pytest

from authorship.config import reset_config
from authorship.config_schema import AppConfig, RegistryConfig
from authorship.registry.content import ContentRegistry
from authorship.registry.factory import Deployment, deploy
from authorship.registry.ledger import RewardToken
from authorship.registry.logger import EventLogger
from tests.testing_utils import CREATOR, OWNER, REGISTRY_ACCOUNT, VirtualClock


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "feature(name): mark test as belonging to a feature. "
        "Usage: @pytest.mark.feature('rewards')"
    )


@pytest.fixture(autouse=True)
def _fresh_config() -> Iterator[None]:
    """Reload config from disk for every test so overrides never leak."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock(_time=1_700_000_000.0)


@pytest.fixture
def event_logger() -> EventLogger:
    """In-memory event logger (no JSONL file)."""
    return EventLogger(output_file="")


@pytest.fixture
def token() -> RewardToken:
    """Token with 1,000,000 minted to the owner and 100,000 in the reward pool."""
    token = RewardToken(owner=OWNER, initial_supply=1_000_000)
    token.transfer(OWNER, REGISTRY_ACCOUNT, 100_000)
    return token


@pytest.fixture
def registry(token: RewardToken, event_logger: EventLogger, clock: VirtualClock) -> ContentRegistry:
    """Registry with default settings and CREATOR holding the creator role."""
    registry = ContentRegistry(
        OWNER,
        token,
        registry_config=RegistryConfig(account_id=REGISTRY_ACCOUNT),
        event_logger=event_logger,
        clock=clock,
    )
    registry.add_creator(OWNER, CREATOR)
    return registry


@pytest.fixture
def deployment(event_logger: EventLogger, clock: VirtualClock) -> Deployment:
    """Full deployment from default config, with CREATOR added."""
    deployment = deploy(OWNER, config=AppConfig(), event_logger=event_logger, clock=clock)
    deployment.registry.add_creator(OWNER, CREATOR)
    return deployment
