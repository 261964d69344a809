"""Liquidation of undercollateralised positions."""
from __future__ import annotations

import logging
from collections.abc import Callable

from ..constants import LIQUIDATION_BONUS, LIQUIDATION_PRECISION
from ..errors import (
    HealthFactorNotImproved,
    HealthFactorOk,
    InvalidAmount,
    LiquidatorHealthFactorBroken,
    UnsupportedAsset,
)
from ..health import is_liquidatable
from ..oracles import PriceOracleAdapter
from ..state import CollateralVault
from .gateway import MintBurnGateway

logger = logging.getLogger(__name__)


def bonus_for(collateral_amount: int) -> int:
    """Extra collateral paid to the liquidator on top of the covered amount."""
    return collateral_amount * LIQUIDATION_BONUS // LIQUIDATION_PRECISION


class LiquidationEngine:
    """Seize collateral plus bonus from an unhealthy position in exchange for
    burning part of its debt with the liquidator's tokens.

    Requests larger than the user's deposited collateral are not clamped; they
    fail with ``InsufficientCollateral``.
    """

    def __init__(
        self,
        vault: CollateralVault,
        oracle: PriceOracleAdapter,
        gateway: MintBurnGateway,
        health_factor: Callable[[str], int],
    ) -> None:
        self._vault = vault
        self._oracle = oracle
        self._gateway = gateway
        self._health_factor = health_factor

    def liquidate(
        self, liquidator: str, user: str, asset: str, debt_to_cover: int
    ) -> int:
        """Liquidate ``debt_to_cover`` of ``user``'s debt against ``asset``.

        Returns the total collateral (including bonus) sent to the liquidator.
        Must run inside an atomic step: later checks rely on earlier effects
        being rolled back when they fail.
        """
        if debt_to_cover <= 0:
            raise InvalidAmount(debt_to_cover)
        if not self._vault.is_allowed(asset):
            raise UnsupportedAsset(asset)

        starting = self._health_factor(user)
        if not is_liquidatable(starting):
            raise HealthFactorOk(user, starting)

        collateral_to_seize = self._oracle.quantity_for(asset, debt_to_cover)
        total_seized = collateral_to_seize + bonus_for(collateral_to_seize)

        self._vault.redeem(user, asset, total_seized, liquidator)
        self._gateway.burn(user, debt_to_cover, payer=liquidator)

        ending = self._health_factor(user)
        if ending <= starting:
            logger.warning(
                "Liquidation of %s by %s did not improve health factor (%d -> %d)",
                user,
                liquidator,
                starting,
                ending,
            )
            raise HealthFactorNotImproved(user, starting, ending)

        liquidator_health = self._health_factor(liquidator)
        if is_liquidatable(liquidator_health):
            raise LiquidatorHealthFactorBroken(liquidator, liquidator_health)

        logger.info(
            "%s liquidated %s: covered %d debt for %d %s (health %d -> %d)",
            liquidator,
            user,
            debt_to_cover,
            total_seized,
            asset,
            starting,
            ending,
        )
        return total_seized
