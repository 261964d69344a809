"""Settable in-memory price feed."""
from __future__ import annotations

import logging
from decimal import Decimal

from ..constants import FEED_DECIMALS

logger = logging.getLogger(__name__)


class StaticPriceFeed:
    """Price feed whose answer is set by hand (tests, scenario replays)."""

    def __init__(self, answer: int) -> None:
        self._answer = answer

    @classmethod
    def from_usd(cls, price: float | int | str) -> StaticPriceFeed:
        """Build a feed from a human price such as ``2000`` or ``"1999.5"``."""
        return cls(int(Decimal(str(price)) * 10**FEED_DECIMALS))

    def latest_price(self) -> int:
        return self._answer

    def update_answer(self, answer: int) -> None:
        logger.debug("Price feed answer %s -> %s", self._answer, answer)
        self._answer = answer
