"""USD valuation of collateral through each asset's price feed.
Conversions are integer fixed point and truncate toward zero:

    usd_value    = price * ADDITIONAL_FEED_PRECISION * quantity // PRECISION
    quantity_for = usd * PRECISION // (price * ADDITIONAL_FEED_PRECISION)

``quantity_for(usd_value(q))`` may come back short of ``q`` by the fractional
remainder dropped in either division.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..constants import ADDITIONAL_FEED_PRECISION, PRECISION
from ..errors import InvalidPrice, UnsupportedAsset
from ..interfaces import PriceFeed


class PriceOracleAdapter:
    """Convert between asset quantities and USD value, one feed per asset."""

    def __init__(self, feeds: Mapping[str, PriceFeed]) -> None:
        self._feeds = dict(feeds)

    def feed_for(self, asset: str) -> PriceFeed:
        try:
            return self._feeds[asset]
        except KeyError:
            raise UnsupportedAsset(asset) from None

    def price_of(self, asset: str) -> int:
        """Latest 8-decimal price; read from the feed on every call."""
        price = self.feed_for(asset).latest_price()
        if price <= 0:
            raise InvalidPrice(f"Non-positive price {price} for {asset}")
        return price

    def usd_value(self, asset: str, quantity: int) -> int:
        price = self.price_of(asset)
        return price * ADDITIONAL_FEED_PRECISION * quantity // PRECISION

    def quantity_for(self, asset: str, usd_value: int) -> int:
        price = self.price_of(asset)
        return usd_value * PRECISION // (price * ADDITIONAL_FEED_PRECISION)

    def total_usd_value(self, balances: Mapping[str, int] | Iterable[tuple[str, int]]) -> int:
        """Sum the USD value of ``asset -> quantity`` balances."""
        items = balances.items() if isinstance(balances, Mapping) else balances
        total = 0
        for asset, quantity in items:
            if quantity:
                total += self.usd_value(asset, quantity)
        return total
