"""Per-user outstanding minted value."""
from __future__ import annotations

from typing import Any

from ..errors import InsufficientDebt, InvalidAmount


class DebtLedger:
    """Pure ledger arithmetic; supply changes happen in the mint/burn gateway."""

    def __init__(self) -> None:
        self._debt: dict[str, int] = {}

    def debt_of(self, user: str) -> int:
        return self._debt.get(user, 0)

    @property
    def total_debt(self) -> int:
        return sum(self._debt.values())

    def increase_debt(self, user: str, amount: int) -> int:
        if amount <= 0:
            raise InvalidAmount(amount)
        self._debt[user] = self.debt_of(user) + amount
        return self._debt[user]

    def decrease_debt(self, user: str, amount: int) -> int:
        if amount <= 0:
            raise InvalidAmount(amount)
        outstanding = self.debt_of(user)
        if amount > outstanding:
            raise InsufficientDebt(user, amount, outstanding)
        self._debt[user] = outstanding - amount
        return self._debt[user]

    def snapshot(self) -> Any:
        return dict(self._debt)

    def restore(self, snapshot: Any) -> None:
        self._debt = dict(snapshot)
