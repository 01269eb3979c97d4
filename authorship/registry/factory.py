"""Deployment factory

Wires a reward token, a content registry and its method service together
the way a fresh deployment needs them:

1. Token created with the initial supply minted to the owner
2. Registry created with the same owner, paying rewards through the token
3. Owner moves registry_funding tokens into the registry's reward pool
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..config import get_validated_config
from ..config_schema import AppConfig
from .content import ContentRegistry
from .ledger import RewardToken
from .logger import EventLogger
from .service import RegistryService

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """Everything one deployment consists of."""

    owner: str
    token: RewardToken
    registry: ContentRegistry
    service: RegistryService
    event_logger: EventLogger


def deploy(
    owner: str,
    config: AppConfig | None = None,
    event_logger: EventLogger | None = None,
    clock: Callable[[], float] = time.time,
) -> Deployment:
    """Create and fund a registry deployment.

    Args:
        owner: Principal that owns both the token and the registry
        config: Optional config (uses global if not provided)
        event_logger: Optional event logger shared by all components
        clock: Timestamp source for content records

    Returns:
        The wired Deployment.

    Raises:
        RuntimeError: If the owner cannot fund the reward pool.
    """
    cfg = config or get_validated_config()
    events = event_logger or EventLogger(
        output_file=cfg.logging.output_file,
        buffer_size=cfg.logging.buffer_size,
    )

    token = RewardToken.from_config(owner, cfg.token)
    registry = ContentRegistry(
        owner,
        token,
        registry_config=cfg.registry,
        event_logger=events,
        clock=clock,
    )
    service = RegistryService(registry, service_config=cfg.service)

    funding = cfg.token.registry_funding
    if funding > 0 and not token.transfer(owner, registry.account_id, funding):
        raise RuntimeError(
            f"Owner {owner} cannot fund reward pool with {funding} "
            f"(balance {token.balance_of(owner)})"
        )

    logger.info(
        "Deployed registry %s for owner %s (reward pool %d, reward %d)",
        registry.account_id, owner, registry.reward_pool(), registry.reward_amount,
    )
    return Deployment(
        owner=owner,
        token=token,
        registry=registry,
        service=service,
        event_logger=events,
    )
