"""In-memory fungible tokens used as collateral assets and as the pegged token.

Both keep plain dict balances/allowances and implement ``snapshot``/``restore``
so the engine can roll them back with a failed atomic step.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .errors import InsufficientAllowance, InsufficientBalance, InvalidAmount, NotOwner

logger = logging.getLogger(__name__)

# Called after balances move: hook(token, sender, recipient, amount)
TransferHook = Callable[["FungibleToken", str, str, int], None]


class FungibleToken:
    """Standard balance/transfer/approve token. Callers pass their identity."""

    def __init__(
        self,
        address: str,
        symbol: str = "",
        on_transfer: TransferHook | None = None,
    ) -> None:
        self.address = address
        self.symbol = symbol or address
        self.on_transfer = on_transfer
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self.total_supply = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.symbol!r})"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        self._move(sender, recipient, amount)
        return True

    def transfer_from(self, spender: str, sender: str, recipient: str, amount: int) -> bool:
        allowed = self.allowance(sender, spender)
        if allowed < amount:
            raise InsufficientAllowance(
                f"{spender} may spend {allowed} {self.symbol} of {sender}, needs {amount}"
            )
        self._allowances[(sender, spender)] = allowed - amount
        self._move(sender, recipient, amount)
        return True

    def _mint(self, to: str, amount: int) -> None:
        self._balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def _burn(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalance(
                f"{account} holds {balance} {self.symbol}, cannot burn {amount}"
            )
        self._balances[account] = balance - amount
        self.total_supply -= amount

    def faucet(self, to: str, amount: int) -> None:
        """Credit ``amount`` out of thin air (test and scenario funding)."""
        self._mint(to, amount)

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance(
                f"{sender} holds {balance} {self.symbol}, cannot send {amount}"
            )
        self._balances[sender] = balance - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        if self.on_transfer is not None:
            self.on_transfer(self, sender, recipient, amount)

    # ------------------------------------------------------------------
    # Transactional
    # ------------------------------------------------------------------

    def snapshot(self) -> Any:
        return dict(self._balances), dict(self._allowances), self.total_supply

    def restore(self, snapshot: Any) -> None:
        balances, allowances, total_supply = snapshot
        self._balances = dict(balances)
        self._allowances = dict(allowances)
        self.total_supply = total_supply


class PeggedToken(FungibleToken):
    """Burnable, mintable token; only ``owner`` may change the supply."""

    def __init__(self, address: str, owner: str, symbol: str = "DSC") -> None:
        super().__init__(address, symbol=symbol)
        self.owner = owner

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self._only_owner(caller)
        logger.info("%s ownership %s -> %s", self.symbol, self.owner, new_owner)
        self.owner = new_owner

    def mint(self, caller: str, to: str, amount: int) -> bool:
        self._only_owner(caller)
        if amount <= 0:
            raise InvalidAmount(amount)
        self._mint(to, amount)
        return True

    def burn(self, caller: str, amount: int) -> None:
        """Burn ``amount`` from the caller's own balance."""
        self._only_owner(caller)
        if amount <= 0:
            raise InvalidAmount(amount)
        self._burn(caller, amount)

    def _only_owner(self, caller: str) -> None:
        if caller != self.owner:
            raise NotOwner(f"{caller} is not the owner of {self.symbol}")
