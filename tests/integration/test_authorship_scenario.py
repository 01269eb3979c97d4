"""End-to-end scenarios against a full deployment.

Each test starts from deploy(): token minted to the owner, 100,000
moved into the reward pool, and CREATOR granted the creator role.
"""

import pytest

from authorship.config_schema import AppConfig, TokenConfig
from authorship.registry.content import ContentStatus
from authorship.registry.errors import (
    AlreadyRegistered,
    LimitExceeded,
    NotAuthor,
    NotAuthorized,
    NotRegistered,
    Unauthorized,
)
from authorship.registry.factory import Deployment, deploy
from authorship.registry.logger import EventLogger
from tests.testing_utils import ADMIN, CREATOR, OWNER, USER, VirtualClock


class TestDeployment:
    """What a fresh deployment looks like."""

    def test_owner_and_pool(self, deployment: Deployment) -> None:
        assert deployment.registry.owner == OWNER
        assert deployment.token.owner == OWNER
        assert deployment.registry.reward_pool() == 100_000
        assert deployment.token.balance_of(OWNER) == 900_000

    def test_shared_event_logger(self, deployment: Deployment) -> None:
        assert deployment.registry.event_logger is deployment.event_logger
        granted = deployment.event_logger.events_of_type("RoleGranted")
        assert granted[0]["account"] == CREATOR

    def test_unfunded_deployment(self, event_logger: EventLogger) -> None:
        config = AppConfig(token=TokenConfig(registry_funding=0))
        deployment = deploy(OWNER, config=config, event_logger=event_logger)

        assert deployment.registry.reward_pool() == 0
        assert deployment.token.balance_of(OWNER) == 1_000_000

    def test_deploy_from_global_config(self) -> None:
        deployment = deploy(OWNER)

        assert deployment.registry.reward_amount == 100
        assert deployment.registry.max_content_limit == 10
        assert deployment.registry.reward_pool() == 100_000


@pytest.mark.feature("rewards")
class TestRegistrationFlow:
    """Registering content and collecting rewards."""

    def test_register_and_reward(self, deployment: Deployment) -> None:
        registry = deployment.registry
        record = registry.register_content(CREATOR, "Qm123")

        assert record.author == CREATOR
        assert record.status is ContentStatus.PENDING
        assert deployment.token.balance_of(CREATOR) == 100
        assert registry.reward_pool() == 99_900

    def test_duplicate_registration(self, deployment: Deployment) -> None:
        deployment.registry.register_content(CREATOR, "Qm123")

        with pytest.raises(AlreadyRegistered, match="Content already registered"):
            deployment.registry.register_content(CREATOR, "Qm123")
        assert deployment.token.balance_of(CREATOR) == 100

    def test_unauthorized_registration(self, deployment: Deployment) -> None:
        with pytest.raises(NotAuthorized, match="Not authorized"):
            deployment.registry.register_content(USER, "Qm123")

    def test_content_limit(self, deployment: Deployment) -> None:
        registry = deployment.registry
        for i in range(10):
            registry.register_content(CREATOR, f"Qm{i}")

        with pytest.raises(LimitExceeded, match="Max content limit reached"):
            registry.register_content(CREATOR, "Qm10")
        assert deployment.token.balance_of(CREATOR) == 1_000
        assert registry.content_count(CREATOR) == 10

    def test_raised_reward(self, deployment: Deployment) -> None:
        deployment.registry.set_reward_amount(OWNER, 250)
        deployment.registry.register_content(CREATOR, "Qm123")

        assert deployment.token.balance_of(CREATOR) == 250

    def test_raised_limit(self, deployment: Deployment) -> None:
        registry = deployment.registry
        registry.set_max_content_limit(OWNER, 11)
        for i in range(11):
            registry.register_content(CREATOR, f"Qm{i}")
        assert registry.content_count(CREATOR) == 11

    def test_events_share_transaction(self, deployment: Deployment) -> None:
        deployment.registry.register_content(CREATOR, "Qm123")

        registered = deployment.event_logger.events_of_type("ContentRegistered")[-1]
        tx = deployment.event_logger.transaction(registered["tx_id"])
        assert [e["event_type"] for e in tx] == ["ContentRegistered", "RewardClaimed"]
        assert tx[1]["recipient"] == CREATOR
        assert tx[1]["amount"] == 100


class TestLifecycle:
    """Register, approve, update, look up."""

    def test_full_lifecycle(self, deployment: Deployment, clock: VirtualClock) -> None:
        registry = deployment.registry
        registry.assign_admin_role(OWNER, ADMIN)

        registry.register_content(CREATOR, "QmV1")
        registry.approve_content(ADMIN, "QmV1")
        clock.advance(60)
        updated = registry.update_content(CREATOR, "QmV1", "QmV2")

        assert updated.version == 2
        assert updated.status is ContentStatus.APPROVED
        assert updated.timestamp == clock()
        assert not registry.get_content("QmV1").exists
        assert registry.get_content("QmV2") == updated
        # Updates pay nothing
        assert deployment.token.balance_of(CREATOR) == 100

    def test_update_by_other_creator(self, deployment: Deployment) -> None:
        registry = deployment.registry
        registry.add_creator(OWNER, USER)
        registry.register_content(CREATOR, "QmV1")

        with pytest.raises(NotAuthor, match="Not the author"):
            registry.update_content(USER, "QmV1", "QmV2")

    def test_approve_unknown_content(self, deployment: Deployment) -> None:
        deployment.registry.assign_admin_role(OWNER, ADMIN)

        with pytest.raises(NotRegistered, match="Content not registered"):
            deployment.registry.approve_content(ADMIN, "QmFake")

    def test_creator_cannot_approve(self, deployment: Deployment) -> None:
        deployment.registry.register_content(CREATOR, "QmV1")

        with pytest.raises(Unauthorized):
            deployment.registry.approve_content(CREATOR, "QmV1")


class TestServiceSurface:
    """The same flow driven through the named-method service."""

    def test_invoke_flow(self, deployment: Deployment) -> None:
        service = deployment.service

        assert service.invoke("assign_admin_role", [ADMIN], OWNER)["success"] is True
        assert service.invoke("register_content", ["Qm123"], CREATOR)["success"] is True
        assert service.invoke("approve_content", ["Qm123"], ADMIN)["success"] is True

        result = service.invoke("get_content", ["Qm123"], USER)
        assert result["content"]["status"] == "approved"
        assert result["content"]["author"] == CREATOR
