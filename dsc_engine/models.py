"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass

from .interfaces import FungibleAsset, PriceFeed


@dataclass(frozen=True)
class CollateralAsset:
    """An allow-listed collateral asset bound to exactly one price feed."""

    token: FungibleAsset
    feed: PriceFeed

    @property
    def address(self) -> str:
        return self.token.address


@dataclass(frozen=True)
class AccountInfo:
    """Outstanding debt and total collateral value (USD, 18 decimals)."""

    total_dsc_minted: int
    collateral_value_usd: int


@dataclass(frozen=True)
class CollateralDeposited:
    user: str
    asset: str
    amount: int


@dataclass(frozen=True)
class CollateralRedeemed:
    redeemed_from: str
    redeemed_to: str
    asset: str
    amount: int


EngineEvent = CollateralDeposited | CollateralRedeemed
