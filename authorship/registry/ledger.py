"""Reward token ledger

Fungible token balances per principal. The registry pays rewards out of
its own account on this ledger; it never mints and holds no supply
authority. Only the token owner can mint.

Balances are int (discrete token units) - no precision issues.
Principals can be any string ID - people or the registry itself.
"""

# All balance mutations go through here.
# Never allow negative balances - fail loud.
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from ..config_schema import TokenConfig
from .errors import ErrorCode, InvalidArgument, Unauthorized

logger = logging.getLogger(__name__)


@runtime_checkable
class TokenLedger(Protocol):
    """What the registry needs from a token ledger.

    transfer returns False (rather than raising) when the sender
    cannot cover the amount.
    """

    def balance_of(self, principal_id: str) -> int: ...

    def transfer(self, from_id: str, to_id: str, amount: int) -> bool: ...


class RewardToken:
    """
    Tracks token balances and allowances per principal.

    - balances: {principal: amount}
    - allowances: {owner: {spender: amount}}

    Transfers auto-create the recipient with a 0 balance, so tokens can
    be sent to the registry account without explicit creation.
    """

    name: str
    symbol: str
    decimals: int
    owner: str
    balances: dict[str, int]
    allowances: dict[str, dict[str, int]]
    _total_supply: int

    def __init__(
        self,
        owner: str,
        initial_supply: int = 0,
        name: str = "RewardToken",
        symbol: str = "RWD",
        decimals: int = 18,
    ) -> None:
        if not owner:
            raise InvalidArgument("Token owner must be a non-empty principal")
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.owner = owner
        self.balances = {}
        self.allowances = {}
        self._total_supply = 0
        if initial_supply > 0:
            self._credit(owner, initial_supply)

    @classmethod
    def from_config(cls, owner: str, token_config: TokenConfig) -> "RewardToken":
        """Create a RewardToken with the initial supply minted to owner."""
        return cls(
            owner=owner,
            initial_supply=token_config.initial_supply,
            name=token_config.name,
            symbol=token_config.symbol,
            decimals=token_config.decimals,
        )

    def _credit(self, principal_id: str, amount: int) -> None:
        self.balances[principal_id] = self.balances.get(principal_id, 0) + amount
        self._total_supply += amount

    # ===== BALANCES =====

    def balance_of(self, principal_id: str) -> int:
        """Get token balance (0 for unknown principals)."""
        return self.balances.get(principal_id, 0)

    def can_afford(self, principal_id: str, amount: int) -> bool:
        """Check if principal holds at least amount."""
        return self.balance_of(principal_id) >= amount

    @property
    def total_supply(self) -> int:
        """Total tokens ever minted."""
        return self._total_supply

    # ===== TRANSFERS =====

    def transfer(self, from_id: str, to_id: str, amount: int) -> bool:
        """Transfer tokens between principals. Returns False if insufficient funds.

        Auto-creates recipient with 0 balance if not exists.
        """
        if amount <= 0:
            return False
        if not self.can_afford(from_id, amount):
            logger.debug("Transfer of %d from %s refused: balance %d",
                         amount, from_id, self.balance_of(from_id))
            return False
        if to_id not in self.balances:
            self.balances[to_id] = 0
        self.balances[from_id] -= amount
        self.balances[to_id] += amount
        return True

    def approve(self, owner_id: str, spender_id: str, amount: int) -> None:
        """Let spender move up to amount of owner's tokens."""
        if amount < 0:
            raise InvalidArgument(f"Allowance must be non-negative, got {amount}")
        self.allowances.setdefault(owner_id, {})[spender_id] = amount

    def allowance(self, owner_id: str, spender_id: str) -> int:
        """Remaining amount spender may move on owner's behalf."""
        return self.allowances.get(owner_id, {}).get(spender_id, 0)

    def transfer_from(self, spender_id: str, from_id: str, to_id: str, amount: int) -> bool:
        """Move tokens from from_id using spender's allowance.

        Returns False if the allowance or the balance is too small; in
        that case neither is changed.
        """
        if amount <= 0:
            return False
        if self.allowance(from_id, spender_id) < amount:
            return False
        if not self.transfer(from_id, to_id, amount):
            return False
        self.allowances[from_id][spender_id] -= amount
        return True

    # ===== SUPPLY (owner only) =====

    def mint(self, caller: str, to_id: str, amount: int) -> None:
        """Create new tokens for to_id. Only the token owner may mint."""
        if caller != self.owner:
            raise Unauthorized(
                f"Only the token owner can mint (caller {caller})",
                code=ErrorCode.NOT_OWNER,
                caller=caller,
            )
        if amount <= 0:
            raise InvalidArgument(f"Mint amount must be positive, got {amount}")
        self._credit(to_id, amount)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """Hand minting rights to another principal."""
        if caller != self.owner:
            raise Unauthorized(
                f"Only the token owner can transfer ownership (caller {caller})",
                code=ErrorCode.NOT_OWNER,
                caller=caller,
            )
        if not new_owner:
            raise InvalidArgument("New owner must be a non-empty principal")
        self.owner = new_owner

    # ===== REPORTING =====

    def get_all_balances(self) -> dict[str, int]:
        """Get snapshot of all balances."""
        return dict(self.balances)
