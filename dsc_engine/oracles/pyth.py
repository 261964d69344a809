"""Pyth Network price feed with Hermes answers normalised to 8 decimals."""
from __future__ import annotations

import logging
import ssl
import time
from collections.abc import Callable, Iterable

import aiohttp
import certifi

from ..config import PythConfig
from ..constants import FEED_DECIMALS
from ..errors import StalePrice

logger = logging.getLogger(__name__)


def normalize_price(price_raw: int, expo: int) -> int:
    """Rescale a Pyth ``price * 10**expo`` answer to FEED_DECIMALS decimals."""
    shift = expo + FEED_DECIMALS
    if shift >= 0:
        return price_raw * 10**shift
    return price_raw // 10**-shift


def _strip_0x(feed_id: str) -> str:
    return feed_id[2:] if feed_id.startswith("0x") else feed_id


class PythPriceFeed:
    """Price feed for one Pyth price id.

    ``refresh()`` pulls the latest update from Hermes; ``latest_price()``
    serves it synchronously and refuses answers older than ``max_age``.
    """

    def __init__(
        self,
        feed_id: str,
        config: PythConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.feed_id = _strip_0x(feed_id)
        self.hermes_url = config.hermes_url
        self.max_age = config.max_price_age
        self._clock = clock
        self._price: int | None = None
        self._publish_time = 0

    def apply_update(self, item: dict) -> None:
        """Store a parsed Hermes price entry."""
        price_data = item.get("price", {})
        price_raw = int(price_data.get("price", 0))
        expo = int(price_data.get("expo", 0))
        self._price = normalize_price(price_raw, expo)
        self._publish_time = int(price_data.get("publish_time", 0))

    async def refresh(self) -> bool:
        """Fetch the latest price for this feed. Returns False on failure."""
        return await refresh_feeds([self], self.hermes_url)

    def latest_price(self) -> int:
        if self._price is None:
            raise StalePrice(f"No price fetched yet for feed {self.feed_id}")
        age = self._clock() - self._publish_time
        if age > self.max_age:
            raise StalePrice(
                f"Price for feed {self.feed_id} is {int(age)}s old (max {self.max_age}s)"
            )
        return self._price


async def refresh_feeds(feeds: Iterable[PythPriceFeed], hermes_url: str) -> bool:
    """Refresh several feeds with a single Hermes request.

    Errors are logged, not raised; feeds that were not updated keep their old
    answer and go stale on their own.
    """
    by_id: dict[str, list[PythPriceFeed]] = {}
    for feed in feeds:
        by_id.setdefault(feed.feed_id, []).append(feed)
    if not by_id:
        return True

    query_params = "&".join([f"ids[]={fid}" for fid in by_id])
    url = f"{hermes_url}?{query_params}"

    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context)

    try:
        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(url) as response:
                if response.status != 200:
                    logger.error(
                        "Error fetching prices from Pyth: HTTP %s", response.status
                    )
                    return False

                data = await response.json()
                updated = 0
                for item in data.get("parsed", []):
                    for feed in by_id.get(_strip_0x(item.get("id", "")), []):
                        feed.apply_update(item)
                        updated += 1

                logger.info("Refreshed %d Pyth price feed(s)", updated)
                return updated > 0

    except Exception as e:
        logger.error("Error fetching prices from Pyth: %s", e)
        return False
