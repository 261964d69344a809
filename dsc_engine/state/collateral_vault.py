"""Per-user, per-asset pledged collateral and custody of the assets.

Ledger entries are always updated before the external asset transfer is made,
so a transfer that calls back into the engine sees the post-mutation balances.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..errors import InsufficientCollateral, InvalidAmount, TransferFailed, UnsupportedAsset
from ..interfaces import FungibleAsset
from ..models import CollateralDeposited, CollateralRedeemed, EngineEvent

logger = logging.getLogger(__name__)


class CollateralVault:
    """Source of truth for how much of each asset every user has pledged."""

    def __init__(
        self,
        custody: str,
        assets: Mapping[str, FungibleAsset],
        emit: Callable[[EngineEvent], None] | None = None,
    ) -> None:
        self.custody = custody
        self._assets = dict(assets)
        self._emit = emit or (lambda event: None)
        self._collateral: dict[str, dict[str, int]] = {}

    def is_allowed(self, asset: str) -> bool:
        return asset in self._assets

    def balance_of(self, user: str, asset: str) -> int:
        return self._collateral.get(user, {}).get(asset, 0)

    def balances_of(self, user: str) -> dict[str, int]:
        return dict(self._collateral.get(user, {}))

    def deposit(self, user: str, asset: str, amount: int) -> None:
        if amount <= 0:
            raise InvalidAmount(amount)
        if not self.is_allowed(asset):
            raise UnsupportedAsset(asset)

        position = self._collateral.setdefault(user, {})
        position[asset] = position.get(asset, 0) + amount
        self._emit(CollateralDeposited(user=user, asset=asset, amount=amount))

        if not self._assets[asset].transfer_from(self.custody, user, self.custody, amount):
            raise TransferFailed(f"Deposit of {amount} {asset} from {user} failed")
        logger.info("%s deposited %d %s", user, amount, asset)

    def redeem(self, user: str, asset: str, amount: int, recipient: str) -> None:
        """Release collateral to ``recipient``. Health is the caller's concern."""
        if amount <= 0:
            raise InvalidAmount(amount)
        available = self.balance_of(user, asset)
        if amount > available:
            raise InsufficientCollateral(user, asset, amount, available)

        self._collateral[user][asset] = available - amount
        self._emit(
            CollateralRedeemed(
                redeemed_from=user, redeemed_to=recipient, asset=asset, amount=amount
            )
        )

        if not self._assets[asset].transfer(self.custody, recipient, amount):
            raise TransferFailed(f"Redeem of {amount} {asset} to {recipient} failed")
        logger.info("%d %s redeemed from %s to %s", amount, asset, user, recipient)

    def snapshot(self) -> Any:
        return {user: dict(assets) for user, assets in self._collateral.items()}

    def restore(self, snapshot: Any) -> None:
        self._collateral = {user: dict(assets) for user, assets in snapshot.items()}
