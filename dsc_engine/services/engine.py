"""Public surface of the DSC engine over collateral, debt, pricing and liquidation.

Every operation takes the caller's identity explicitly and runs as one atomic
step: it either applies all of its effects (ledgers, token balances, events) or
none of them.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .. import constants
from ..errors import DuplicateAsset, HealthFactorBroken, LengthMismatch
from ..health import calculate_health_factor, is_liquidatable
from ..interfaces import FungibleAsset, PeggedToken, PriceFeed, Transactional
from ..models import AccountInfo, CollateralAsset, EngineEvent
from ..oracles import PriceOracleAdapter
from ..state import CollateralVault, DebtLedger
from ..transaction import StateJournal, atomic_operation
from .gateway import MintBurnGateway
from .liquidation import LiquidationEngine

logger = logging.getLogger(__name__)


def _require_transactional(token: object) -> None:
    if not isinstance(token, Transactional):
        raise TypeError(
            f"{token!r} has no snapshot/restore; its transfers could not be rolled back"
        )


class DSCEngine:
    """Collateral-backed issuance engine for the pegged token.

    Args:
        assets: Allow-listed collateral assets, fixed for the engine's life.
        feeds: One price feed per asset, in the same order.
        dsc: The pegged token; the engine must be (or become) its owner.
            Assets and the pegged token must also be ``Transactional`` so their
            balances roll back with a failed step.
        address: Identity the engine acts as for custody and mint/burn.
    """

    def __init__(
        self,
        assets: Sequence[FungibleAsset],
        feeds: Sequence[PriceFeed],
        dsc: PeggedToken,
        address: str = "dsc-engine",
    ) -> None:
        if len(assets) != len(feeds):
            raise LengthMismatch(len(assets), len(feeds))

        collateral: dict[str, CollateralAsset] = {}
        for token, feed in zip(assets, feeds):
            if token.address in collateral:
                raise DuplicateAsset(token.address)
            _require_transactional(token)
            collateral[token.address] = CollateralAsset(token=token, feed=feed)
        _require_transactional(dsc)

        self.address = address
        self.dsc = dsc
        self.events: list[EngineEvent] = []
        self._collateral = collateral

        self._oracle = PriceOracleAdapter(
            {addr: c.feed for addr, c in collateral.items()}
        )
        self._vault = CollateralVault(
            address,
            {addr: c.token for addr, c in collateral.items()},
            emit=self._emit,
        )
        self._debts = DebtLedger()
        self._gateway = MintBurnGateway(
            address, dsc, self._debts, self.get_account_collateral_value
        )
        self._liquidation = LiquidationEngine(
            self._vault, self._oracle, self._gateway, self.get_health_factor
        )

        self._journal = StateJournal([self._vault, self._debts, self])
        for c in collateral.values():
            self._journal.enlist(c.token)
        self._journal.enlist(dsc)

        logger.info(
            "Engine %s created with collateral %s", address, ", ".join(collateral)
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @atomic_operation
    def deposit_collateral(self, user: str, asset: str, amount: int) -> None:
        """Pledge ``amount`` of ``asset``; the engine must be approved first."""
        self._vault.deposit(user, asset, amount)

    @atomic_operation
    def redeem_collateral(self, user: str, asset: str, amount: int) -> None:
        """Withdraw collateral, provided the position stays healthy."""
        self._vault.redeem(user, asset, amount, user)
        self._revert_if_health_factor_is_broken(user)

    @atomic_operation
    def mint_dsc(self, user: str, amount: int) -> None:
        self._gateway.mint(user, amount)

    @atomic_operation
    def burn_dsc(self, user: str, amount: int) -> None:
        """Repay own debt; the engine must be approved to pull ``amount`` DSC."""
        self._gateway.burn(user, amount, payer=user)
        self._revert_if_health_factor_is_broken(user)

    @atomic_operation
    def deposit_collateral_and_mint_dsc(
        self, user: str, asset: str, collateral_amount: int, dsc_amount: int
    ) -> None:
        self._vault.deposit(user, asset, collateral_amount)
        self._gateway.mint(user, dsc_amount)

    @atomic_operation
    def redeem_collateral_for_dsc(
        self, user: str, asset: str, collateral_amount: int, dsc_amount: int
    ) -> None:
        """Burn ``dsc_amount`` and withdraw ``collateral_amount`` in one step."""
        self._gateway.burn(user, dsc_amount, payer=user)
        self._vault.redeem(user, asset, collateral_amount, user)
        self._revert_if_health_factor_is_broken(user)

    @atomic_operation
    def liquidate(
        self, liquidator: str, user: str, asset: str, debt_to_cover: int
    ) -> int:
        """Cover ``debt_to_cover`` of an unhealthy ``user``'s debt for collateral.

        Returns the amount of ``asset`` (bonus included) paid to the liquidator.
        """
        return self._liquidation.liquidate(liquidator, user, asset, debt_to_cover)

    def _revert_if_health_factor_is_broken(self, user: str) -> None:
        health_factor = self.get_health_factor(user)
        if is_liquidatable(health_factor):
            logger.warning("Health factor of %s broken: %d", user, health_factor)
            raise HealthFactorBroken(user, health_factor)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_account_information(self, user: str) -> AccountInfo:
        return AccountInfo(
            total_dsc_minted=self._debts.debt_of(user),
            collateral_value_usd=self.get_account_collateral_value(user),
        )

    def get_account_collateral_value(self, user: str) -> int:
        return self._oracle.total_usd_value(self._vault.balances_of(user))

    def get_collateral_balance_of_user(self, user: str, asset: str) -> int:
        return self._vault.balance_of(user, asset)

    def get_usd_value(self, asset: str, amount: int) -> int:
        return self._oracle.usd_value(asset, amount)

    def get_token_amount_from_usd(self, asset: str, usd_amount: int) -> int:
        return self._oracle.quantity_for(asset, usd_amount)

    def get_health_factor(self, user: str) -> int:
        info = self.get_account_information(user)
        return calculate_health_factor(info.total_dsc_minted, info.collateral_value_usd)

    @staticmethod
    def calculate_health_factor(total_dsc_minted: int, collateral_value_usd: int) -> int:
        """Health factor of a hypothetical position."""
        return calculate_health_factor(total_dsc_minted, collateral_value_usd)

    def get_collateral_tokens(self) -> list[str]:
        return list(self._collateral)

    def get_collateral_token_price_feed(self, asset: str) -> PriceFeed:
        return self._oracle.feed_for(asset)

    def get_dsc(self) -> PeggedToken:
        return self.dsc

    @property
    def total_dsc_minted(self) -> int:
        return self._debts.total_debt

    # Constants

    @staticmethod
    def get_precision() -> int:
        return constants.PRECISION

    @staticmethod
    def get_additional_feed_precision() -> int:
        return constants.ADDITIONAL_FEED_PRECISION

    @staticmethod
    def get_liquidation_threshold() -> int:
        return constants.LIQUIDATION_THRESHOLD

    @staticmethod
    def get_liquidation_bonus() -> int:
        return constants.LIQUIDATION_BONUS

    @staticmethod
    def get_liquidation_precision() -> int:
        return constants.LIQUIDATION_PRECISION

    @staticmethod
    def get_min_health_factor() -> int:
        return constants.MIN_HEALTH_FACTOR

    # ------------------------------------------------------------------
    # Events (rolled back with the step that emitted them)
    # ------------------------------------------------------------------

    def _emit(self, event: EngineEvent) -> None:
        logger.debug("Event %s", event)
        self.events.append(event)

    def snapshot(self) -> Any:
        return len(self.events)

    def restore(self, snapshot: Any) -> None:
        del self.events[snapshot:]
