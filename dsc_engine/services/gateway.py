"""The only component allowed to change the pegged token's supply."""
from __future__ import annotations

import logging
from collections.abc import Callable

from ..errors import HealthFactorBroken, InvalidAmount, MintFailed, TransferFailed
from ..health import calculate_health_factor, is_liquidatable
from ..interfaces import PeggedToken
from ..state import DebtLedger

logger = logging.getLogger(__name__)


class MintBurnGateway:
    """Translate debt changes into pegged-token supply changes.

    Args:
        address: Identity the gateway acts as; must own ``pegged``.
        pegged: The pegged token.
        debts: Debt ledger updated alongside every supply change.
        collateral_value: ``user -> collateral USD value`` used to project
            the health factor before minting.
    """

    def __init__(
        self,
        address: str,
        pegged: PeggedToken,
        debts: DebtLedger,
        collateral_value: Callable[[str], int],
    ) -> None:
        self.address = address
        self.pegged = pegged
        self._debts = debts
        self._collateral_value = collateral_value

    def mint(self, user: str, amount: int) -> None:
        """Project the health factor with the new debt, then commit and mint."""
        if amount <= 0:
            raise InvalidAmount(amount)

        projected = calculate_health_factor(
            self._debts.debt_of(user) + amount, self._collateral_value(user)
        )
        if is_liquidatable(projected):
            logger.warning(
                "Mint of %d for %s rejected, projected health factor %d",
                amount,
                user,
                projected,
            )
            raise HealthFactorBroken(user, projected)

        self._debts.increase_debt(user, amount)
        if not self.pegged.mint(self.address, user, amount):
            raise MintFailed(f"Minting {amount} to {user} failed")
        logger.info("Minted %d to %s", amount, user)

    def burn(self, on_behalf_of: str, amount: int, payer: str) -> None:
        """Retire ``amount`` of ``on_behalf_of``'s debt with ``payer``'s tokens."""
        self._debts.decrease_debt(on_behalf_of, amount)

        if not self.pegged.transfer_from(self.address, payer, self.address, amount):
            raise TransferFailed(f"Collecting {amount} from {payer} failed")
        self.pegged.burn(self.address, amount)
        logger.info("Burned %d of %s's debt paid by %s", amount, on_behalf_of, payer)
