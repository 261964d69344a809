"""Price feed protocol — one external feed per collateral asset."""
from typing import Protocol


class PriceFeed(Protocol):
    """Abstract interface for reading an asset's USD price."""

    def latest_price(self) -> int: ...
