"""Unit tests for USD valuation through price feeds."""
from __future__ import annotations

import pytest

from dsc_engine.errors import InvalidPrice, UnsupportedAsset
from dsc_engine.oracles import PriceOracleAdapter, StaticPriceFeed

E18 = 10**18


@pytest.fixture()
def feed() -> StaticPriceFeed:
    return StaticPriceFeed(2000 * 10**8)


@pytest.fixture()
def adapter(feed: StaticPriceFeed) -> PriceOracleAdapter:
    return PriceOracleAdapter({"weth": feed, "wbtc": StaticPriceFeed(1000 * 10**8)})


class TestUsdValue:
    def test_fifteen_eth(self, adapter: PriceOracleAdapter) -> None:
        assert adapter.usd_value("weth", 15 * E18) == 30000 * E18

    def test_zero_quantity(self, adapter: PriceOracleAdapter) -> None:
        assert adapter.usd_value("weth", 0) == 0

    def test_reads_feed_every_call(
        self, adapter: PriceOracleAdapter, feed: StaticPriceFeed
    ) -> None:
        assert adapter.usd_value("weth", E18) == 2000 * E18
        feed.update_answer(18 * 10**8)
        assert adapter.usd_value("weth", E18) == 18 * E18

    def test_unknown_asset(self, adapter: PriceOracleAdapter) -> None:
        with pytest.raises(UnsupportedAsset):
            adapter.usd_value("doge", E18)

    @pytest.mark.parametrize("answer", [0, -1])
    def test_non_positive_price(
        self, adapter: PriceOracleAdapter, feed: StaticPriceFeed, answer: int
    ) -> None:
        feed.update_answer(answer)
        with pytest.raises(InvalidPrice):
            adapter.usd_value("weth", E18)


class TestQuantityFor:
    def test_hundred_usd(self, adapter: PriceOracleAdapter) -> None:
        assert adapter.quantity_for("weth", 100 * E18) == E18 * 5 // 100

    def test_truncates_toward_zero(self, adapter: PriceOracleAdapter) -> None:
        # 1 wei of USD is worth less than 1 wei of WETH
        assert adapter.quantity_for("weth", 1) == 0

    def test_round_trip_may_lose_remainder(self) -> None:
        adapter = PriceOracleAdapter({"x": StaticPriceFeed(3 * 10**8)})
        quantity = 10
        back = adapter.quantity_for("x", adapter.usd_value("x", quantity))
        assert back == quantity
        assert adapter.usd_value("x", adapter.quantity_for("x", 10)) == 9


class TestTotalUsdValue:
    def test_sums_assets(self, adapter: PriceOracleAdapter) -> None:
        assert adapter.total_usd_value({"weth": E18, "wbtc": 2 * E18}) == 4000 * E18

    def test_accepts_pairs(self, adapter: PriceOracleAdapter) -> None:
        assert adapter.total_usd_value([("weth", E18)]) == 2000 * E18

    def test_empty(self, adapter: PriceOracleAdapter) -> None:
        assert adapter.total_usd_value({}) == 0
