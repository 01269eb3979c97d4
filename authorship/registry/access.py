"""Access control - owner, admin and creator capabilities

Roles are flat capability sets, not a hierarchy. The owner is not
implicitly an admin or a creator; each capability must be granted
explicitly. Every privileged action checks exactly one thing: owner
identity, or membership of one set.
"""

from __future__ import annotations

import logging
from enum import Enum

from .errors import ErrorCode, InvalidArgument, NotAuthorized, Unauthorized
from .logger import (
    OWNERSHIP_TRANSFERRED,
    ROLE_GRANTED,
    ROLE_REVOKED,
    EventLogger,
)

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Capabilities a principal can hold."""

    OWNER = "owner"
    ADMIN = "admin"
    CREATOR = "creator"


def _as_role(role: Role | str) -> Role:
    try:
        return Role(role)
    except ValueError as exc:
        raise InvalidArgument(
            f"Unknown role {role!r}. Valid roles: {[r.value for r in Role]}",
            provided=role,
        ) from exc


class AccessControl:
    """Owner identity plus admin and creator membership sets.

    Only the owner may change membership. Grants and revocations are
    idempotent: repeating one is not an error and emits no event.
    """

    owner: str
    admins: set[str]
    creators: set[str]
    event_logger: EventLogger | None

    def __init__(self, owner: str, event_logger: EventLogger | None = None) -> None:
        if not owner:
            raise InvalidArgument("Owner must be a non-empty principal")
        self.owner = owner
        self.admins = set()
        self.creators = set()
        self.event_logger = event_logger

    # ===== QUERIES =====

    def is_owner(self, principal: str) -> bool:
        return principal == self.owner

    def has_role(self, principal: str, role: Role | str) -> bool:
        """Check whether principal holds role. Anyone may ask."""
        role = _as_role(role)
        if role is Role.OWNER:
            return self.is_owner(principal)
        if role is Role.ADMIN:
            return principal in self.admins
        return principal in self.creators

    def list_members(self, role: Role | str) -> list[str]:
        """Sorted members of a role."""
        role = _as_role(role)
        if role is Role.OWNER:
            return [self.owner]
        members = self.admins if role is Role.ADMIN else self.creators
        return sorted(members)

    # ===== CHECKS =====

    def require_owner(self, caller: str, action: str) -> None:
        """Raise Unauthorized unless caller is the owner."""
        if not self.is_owner(caller):
            logger.warning("Rejected %s by %s: owner only", action, caller)
            raise Unauthorized(
                f"Unauthorized: only the owner can {action}",
                code=ErrorCode.NOT_OWNER,
                caller=caller,
            )

    def require_admin(self, caller: str, action: str) -> None:
        """Raise Unauthorized unless caller holds the admin role."""
        if caller not in self.admins:
            logger.warning("Rejected %s by %s: admin role required", action, caller)
            raise Unauthorized(
                f"Unauthorized: admin role required to {action}",
                caller=caller,
            )

    def require_creator(self, caller: str) -> None:
        """Raise NotAuthorized unless caller holds the creator role."""
        if caller not in self.creators:
            logger.warning("Rejected content change by %s: creator role required", caller)
            raise NotAuthorized(
                "Not authorized: Creator role required",
                caller=caller,
            )

    # ===== GRANTS (owner only) =====

    def add_creator(self, caller: str, principal: str) -> bool:
        """Grant the creator role. Returns True if membership changed."""
        self.require_owner(caller, "add creators")
        return self._grant(self.creators, Role.CREATOR, principal, caller)

    def assign_admin_role(self, caller: str, principal: str) -> bool:
        """Grant the admin role. Returns True if membership changed."""
        self.require_owner(caller, "assign the admin role")
        return self._grant(self.admins, Role.ADMIN, principal, caller)

    def remove_creator(self, caller: str, principal: str) -> bool:
        """Revoke the creator role. Existing records stay with their author."""
        self.require_owner(caller, "remove creators")
        return self._revoke(self.creators, Role.CREATOR, principal, caller)

    def revoke_admin_role(self, caller: str, principal: str) -> bool:
        """Revoke the admin role."""
        self.require_owner(caller, "revoke the admin role")
        return self._revoke(self.admins, Role.ADMIN, principal, caller)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """Hand the owner identity to another principal.

        Admin and creator memberships are untouched.
        """
        self.require_owner(caller, "transfer ownership")
        if not new_owner:
            raise InvalidArgument("New owner must be a non-empty principal")
        previous = self.owner
        self.owner = new_owner
        logger.info("Ownership transferred from %s to %s", previous, new_owner)
        self._emit(OWNERSHIP_TRANSFERRED, {"previous_owner": previous, "new_owner": new_owner})

    def _grant(self, members: set[str], role: Role, principal: str, caller: str) -> bool:
        if not principal:
            raise InvalidArgument(f"Cannot grant {role.value} to an empty principal")
        if principal in members:
            return False
        members.add(principal)
        logger.debug("Granted %s to %s", role.value, principal)
        self._emit(ROLE_GRANTED, {"role": role.value, "account": principal, "sender": caller})
        return True

    def _revoke(self, members: set[str], role: Role, principal: str, caller: str) -> bool:
        if principal not in members:
            return False
        members.discard(principal)
        logger.debug("Revoked %s from %s", role.value, principal)
        self._emit(ROLE_REVOKED, {"role": role.value, "account": principal, "sender": caller})
        return True

    def _emit(self, event_type: str, data: dict[str, str]) -> None:
        if self.event_logger is not None:
            self.event_logger.log(event_type, data)
