"""Content registry - registration, re-versioning, approval and rewards

Records are keyed by content hash. A record is live while its hash
resolves to it; update_content moves it to a new hash (the old hash
stops resolving) and bumps its version. Authorship never changes.

Every mutating operation runs as one unit: preconditions are checked
before any write, writes are staged against a snapshot of the keys they
touch, and any failure (including a refused reward transfer) restores the
snapshot and drops the operation's events. Events are published only
after the operation commits.

Lifecycle of one lineage:
    (absent) --register--> PENDING --approve--> APPROVED
    PENDING/APPROVED --update--> old hash absent, new hash at version+1
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from enum import IntEnum
from typing import Any, Callable, Iterator

from ..config import get_validated_config
from ..config_schema import RegistryConfig
from .access import AccessControl, Role
from .errors import (
    AlreadyRegistered,
    InvalidArgument,
    LimitExceeded,
    NotAuthor,
    NotRegistered,
    RewardTransferFailed,
)
from .ledger import TokenLedger
from .logger import (
    CONFIG_UPDATED,
    CONTENT_APPROVED,
    CONTENT_REGISTERED,
    CONTENT_UPDATED,
    REWARD_CLAIMED,
    EventLogger,
)

logger = logging.getLogger(__name__)

PendingEvents = list[tuple[str, dict[str, Any]]]


class ContentStatus(IntEnum):
    """Approval state. APPROVED is terminal."""

    PENDING = 0
    APPROVED = 1


@dataclass(frozen=True)
class ContentRecord:
    """One live piece of registered content."""

    content_hash: str
    author: str
    status: ContentStatus
    version: int
    timestamp: float

    @property
    def exists(self) -> bool:
        """False for the empty record returned by lookups that miss."""
        return self.content_hash != ""

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["status"] = self.status.name.lower()
        return result


# Returned for absent or superseded hashes
EMPTY_RECORD = ContentRecord(
    content_hash="",
    author="",
    status=ContentStatus.PENDING,
    version=0,
    timestamp=0.0,
)


def _require_hash(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f"{name} must be a non-empty string, got {value!r}")
    return value


def _require_non_negative_int(value: Any, name: str) -> int:
    # bool is an int subclass; True is not a reward amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {type(value).__name__}: {value!r}")
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value}")
    return value


class ContentRegistry:
    """
    Authoritative store of content records.

    - records: {content_hash: ContentRecord} for live records only
    - content_counts: {creator: records registered}, checked against
      max_content_limit at registration and left alone by updates

    Rewards are paid from account_id's balance on the token ledger,
    which must be funded beforehand.
    """

    access: AccessControl
    token: TokenLedger
    account_id: str
    update_approval_policy: str
    event_logger: EventLogger
    _records: dict[str, ContentRecord]
    _content_counts: dict[str, int]
    _reward_amount: int
    _max_content_limit: int
    _clock: Callable[[], float]

    def __init__(
        self,
        owner: str,
        token: TokenLedger,
        registry_config: RegistryConfig | None = None,
        event_logger: EventLogger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            owner: Principal allowed to grant roles and tune configuration
            token: Ledger the reward is paid through
            registry_config: Optional registry config (uses global if not provided)
            event_logger: Where committed events go (a fresh one if not provided)
            clock: Source of record timestamps
        """
        cfg = registry_config or get_validated_config().registry
        self.event_logger = event_logger or EventLogger()
        self.access = AccessControl(owner, self.event_logger)
        self.token = token
        self.account_id = cfg.account_id
        self.update_approval_policy = cfg.update_approval_policy
        self._reward_amount = cfg.reward_amount
        self._max_content_limit = cfg.max_content_limit
        self._records = {}
        self._content_counts = {}
        self._clock = clock

    # ===== TRANSACTIONS =====

    @contextmanager
    def _transaction(
        self,
        keys: list[str],
        counted: list[str] | None = None,
    ) -> Iterator[PendingEvents]:
        """Stage writes to `keys` (and counts of `counted`) as one unit.

        Yields a list the caller appends (event_type, data) pairs to.
        On exception the touched entries are restored and nothing is
        published; on success every event is logged with a shared tx_id.
        """
        saved_records = {key: self._records.get(key) for key in keys}
        saved_counts = {p: self._content_counts.get(p) for p in counted or []}
        pending: PendingEvents = []
        try:
            yield pending
        except Exception:
            for key, record in saved_records.items():
                if record is None:
                    self._records.pop(key, None)
                else:
                    self._records[key] = record
            for principal, count in saved_counts.items():
                if count is None:
                    self._content_counts.pop(principal, None)
                else:
                    self._content_counts[principal] = count
            logger.warning("Rolled back staged writes to %s", keys)
            raise

        tx_id = uuid.uuid4().hex
        for event_type, data in pending:
            self.event_logger.log(event_type, {"tx_id": tx_id, **data})

    def _pay_reward(self, recipient: str, amount: int) -> None:
        try:
            paid = self.token.transfer(self.account_id, recipient, amount)
        except Exception as exc:
            raise RewardTransferFailed(
                f"Reward transfer failed: {exc}",
                recipient=recipient,
                amount=amount,
            ) from exc
        if not paid:
            raise RewardTransferFailed(
                f"Reward transfer failed: registry holds "
                f"{self.token.balance_of(self.account_id)}, needs {amount}",
                recipient=recipient,
                amount=amount,
            )

    # ===== CONTENT OPERATIONS =====

    def register_content(self, caller: str, content_hash: str) -> ContentRecord:
        """Register new content and pay the author the current reward.

        Raises:
            NotAuthorized: caller is not a creator
            InvalidArgument: content_hash is empty or not a string
            AlreadyRegistered: content_hash is already live
            LimitExceeded: caller is at max_content_limit
            RewardTransferFailed: the reward pool could not pay (nothing is kept)
        """
        self.access.require_creator(caller)
        _require_hash(content_hash, "content_hash")
        if content_hash in self._records:
            raise AlreadyRegistered("Content already registered", content_hash=content_hash)
        count = self.content_count(caller)
        if count >= self._max_content_limit:
            raise LimitExceeded(
                "Max content limit reached",
                limit=self._max_content_limit,
                count=count,
            )

        reward = self._reward_amount
        record = ContentRecord(
            content_hash=content_hash,
            author=caller,
            status=ContentStatus.PENDING,
            version=1,
            timestamp=self._clock(),
        )
        with self._transaction([content_hash], [caller]) as events:
            self._records[content_hash] = record
            self._content_counts[caller] = count + 1
            events.append((CONTENT_REGISTERED, {
                "author": caller,
                "content_hash": content_hash,
                "timestamp": record.timestamp,
            }))
            if reward > 0:
                self._pay_reward(caller, reward)
                events.append((REWARD_CLAIMED, {
                    "recipient": caller,
                    "amount": reward,
                    "content_hash": content_hash,
                }))

        logger.debug("Registered %s for %s (reward %d)", content_hash, caller, reward)
        return record

    def update_content(self, caller: str, old_hash: str, new_hash: str) -> ContentRecord:
        """Move caller's record from old_hash to new_hash at version + 1.

        The old hash stops resolving. Status follows update_approval_policy:
        "preserve" keeps it, "reset" returns it to PENDING. No reward is paid
        and the creator's content count is unchanged. Passing the same hash
        twice re-versions the record in place.

        Raises:
            NotAuthorized: caller is not a creator
            InvalidArgument: a hash is not a string or new_hash is empty
            NotRegistered: old_hash is not live
            NotAuthor: caller is not the record's author
            AlreadyRegistered: new_hash is a different live record
        """
        self.access.require_creator(caller)
        if not isinstance(old_hash, str):
            raise InvalidArgument(f"old_hash must be a string, got {old_hash!r}")
        _require_hash(new_hash, "new_hash")
        current = self._records.get(old_hash)
        if current is None:
            raise NotRegistered("Content not registered", content_hash=old_hash)
        if current.author != caller:
            raise NotAuthor("Not the author", content_hash=old_hash, caller=caller)
        if new_hash != old_hash and new_hash in self._records:
            raise AlreadyRegistered("Content already registered", content_hash=new_hash)

        if self.update_approval_policy == "reset":
            status = ContentStatus.PENDING
        else:
            status = current.status
        updated = replace(
            current,
            content_hash=new_hash,
            status=status,
            version=current.version + 1,
            timestamp=max(self._clock(), current.timestamp),
        )
        with self._transaction([old_hash, new_hash]) as events:
            del self._records[old_hash]
            self._records[new_hash] = updated
            events.append((CONTENT_UPDATED, {
                "author": caller,
                "old_hash": old_hash,
                "new_hash": new_hash,
                "version": updated.version,
                "timestamp": updated.timestamp,
            }))

        logger.debug("Updated %s -> %s (v%d)", old_hash, new_hash, updated.version)
        return updated

    def approve_content(self, caller: str, content_hash: str) -> ContentRecord:
        """Mark a live record APPROVED.

        Approving an already approved record returns it unchanged and
        emits nothing.

        Raises:
            Unauthorized: caller is not an admin
            NotRegistered: content_hash is not live
        """
        self.access.require_admin(caller, "approve content")
        current = self._records.get(content_hash) if isinstance(content_hash, str) else None
        if current is None:
            raise NotRegistered("Content not registered", content_hash=content_hash)
        if current.status is ContentStatus.APPROVED:
            return current

        approved = replace(current, status=ContentStatus.APPROVED)
        with self._transaction([content_hash]) as events:
            self._records[content_hash] = approved
            events.append((CONTENT_APPROVED, {"content_hash": content_hash, "approver": caller}))
        return approved

    def get_content(self, content_hash: str) -> ContentRecord:
        """Look up a record. Missing hashes return EMPTY_RECORD, never raise."""
        if not isinstance(content_hash, str):
            return EMPTY_RECORD
        return self._records.get(content_hash, EMPTY_RECORD)

    def is_registered(self, content_hash: str) -> bool:
        return self.get_content(content_hash).exists

    def content_count(self, principal: str) -> int:
        """Records principal has registered (updates do not change it)."""
        return self._content_counts.get(principal, 0)

    def list_content(self, author: str | None = None) -> list[ContentRecord]:
        """Live records, optionally only those by author, sorted by hash."""
        records = [
            r for r in self._records.values()
            if author is None or r.author == author
        ]
        return sorted(records, key=lambda r: r.content_hash)

    # ===== CONFIGURATION (owner only) =====

    @property
    def reward_amount(self) -> int:
        return self._reward_amount

    @property
    def max_content_limit(self) -> int:
        return self._max_content_limit

    def set_reward_amount(self, caller: str, amount: int) -> None:
        """Set the reward for future registrations."""
        self.access.require_owner(caller, "set the reward amount")
        _require_non_negative_int(amount, "amount")
        self._set_config("reward_amount", amount)

    def set_max_content_limit(self, caller: str, limit: int) -> None:
        """Set the per-creator limit for future registrations.

        Lowering it never removes existing records.
        """
        self.access.require_owner(caller, "set the max content limit")
        _require_non_negative_int(limit, "limit")
        self._set_config("max_content_limit", limit)

    def _set_config(self, key: str, value: int) -> None:
        attr = f"_{key}"
        previous = getattr(self, attr)
        with self._transaction([]) as events:
            setattr(self, attr, value)
            events.append((CONFIG_UPDATED, {"key": key, "previous": previous, "value": value}))
        logger.info("%s changed from %d to %d", key, previous, value)

    def reward_pool(self) -> int:
        """Tokens the registry currently holds for rewards."""
        return self.token.balance_of(self.account_id)

    # ===== ROLE ADMINISTRATION (delegates to access control) =====

    @property
    def owner(self) -> str:
        return self.access.owner

    def add_creator(self, caller: str, principal: str) -> bool:
        return self.access.add_creator(caller, principal)

    def assign_admin_role(self, caller: str, principal: str) -> bool:
        return self.access.assign_admin_role(caller, principal)

    def remove_creator(self, caller: str, principal: str) -> bool:
        return self.access.remove_creator(caller, principal)

    def revoke_admin_role(self, caller: str, principal: str) -> bool:
        return self.access.revoke_admin_role(caller, principal)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self.access.transfer_ownership(caller, new_owner)

    def has_role(self, principal: str, role: Role | str) -> bool:
        return self.access.has_role(principal, role)
