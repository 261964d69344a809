"""Unit tests for the Pyth price feed — response parsing, staleness, errors."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from dsc_engine.config import PythConfig
from dsc_engine.errors import StalePrice
from dsc_engine.oracles.pyth import PythPriceFeed, normalize_price, refresh_feeds

NOW = 1_700_000_000
HERMES = "https://hermes.example.com/v2/updates/price/latest"


def _feed(feed_id: str, now: float = NOW) -> PythPriceFeed:
    return PythPriceFeed(
        feed_id,
        PythConfig(hermes_url=HERMES, max_price_age=60),
        clock=lambda: now,
    )


def _make_pyth_response(items: list[dict]) -> dict:
    return {"parsed": items}


def _mock_session(status: int = 200, data: dict | None = None) -> AsyncMock:
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=data or {})
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = AsyncMock()
    mock_session.get = MagicMock(return_value=mock_response)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    return mock_session


class TestNormalizePrice:
    def test_same_exponent(self) -> None:
        assert normalize_price(200000000000, -8) == 2000 * 10**8

    def test_more_decimals_truncates(self) -> None:
        assert normalize_price(123456789, -10) == 1234567

    def test_fewer_decimals(self) -> None:
        assert normalize_price(2000, 0) == 2000 * 10**8


class TestLatestPrice:
    def test_no_update_is_stale(self) -> None:
        with pytest.raises(StalePrice):
            _feed("aaa").latest_price()

    def test_fresh_update(self) -> None:
        feed = _feed("aaa")
        feed.apply_update(
            {"id": "aaa", "price": {"price": "200000000000", "expo": -8, "publish_time": NOW - 10}}
        )
        assert feed.latest_price() == 2000 * 10**8

    def test_old_update_is_stale(self) -> None:
        feed = _feed("aaa")
        feed.apply_update(
            {"id": "aaa", "price": {"price": "1", "expo": -8, "publish_time": NOW - 61}}
        )
        with pytest.raises(StalePrice):
            feed.latest_price()

    def test_strips_0x(self) -> None:
        assert _feed("0xabc").feed_id == "abc"


class TestRefreshFeeds:
    @pytest.mark.asyncio
    async def test_parses_response_correctly(self) -> None:
        eth, btc = _feed("aaa111"), _feed("0xbbb222")
        data = _make_pyth_response(
            [
                {"id": "aaa111", "price": {"price": "350000000000", "expo": "-8", "publish_time": NOW}},
                {"id": "bbb222", "price": {"price": "10000000000000", "expo": "-8", "publish_time": NOW}},
            ]
        )

        with patch("dsc_engine.oracles.pyth.aiohttp.ClientSession", return_value=_mock_session(data=data)):
            with patch("dsc_engine.oracles.pyth.aiohttp.TCPConnector"):
                ok = await refresh_feeds([eth, btc], HERMES)

        assert ok
        assert eth.latest_price() == 3500 * 10**8
        assert btc.latest_price() == 100000 * 10**8

    @pytest.mark.asyncio
    async def test_single_feed_refresh(self) -> None:
        feed = _feed("aaa111")
        data = _make_pyth_response(
            [{"id": "aaa111", "price": {"price": "100000000", "expo": -8, "publish_time": NOW}}]
        )
        with patch("dsc_engine.oracles.pyth.aiohttp.ClientSession", return_value=_mock_session(data=data)):
            with patch("dsc_engine.oracles.pyth.aiohttp.TCPConnector"):
                assert await feed.refresh()
        assert feed.latest_price() == 10**8

    @pytest.mark.asyncio
    async def test_handles_http_error(self) -> None:
        feed = _feed("aaa111")
        with patch("dsc_engine.oracles.pyth.aiohttp.ClientSession", return_value=_mock_session(status=500)):
            with patch("dsc_engine.oracles.pyth.aiohttp.TCPConnector"):
                ok = await refresh_feeds([feed], HERMES)

        assert not ok
        with pytest.raises(StalePrice):
            feed.latest_price()

    @pytest.mark.asyncio
    async def test_handles_network_error(self) -> None:
        mock_session = _mock_session()
        mock_session.get = MagicMock(side_effect=ConnectionError("timeout"))

        with patch("dsc_engine.oracles.pyth.aiohttp.ClientSession", return_value=mock_session):
            with patch("dsc_engine.oracles.pyth.aiohttp.TCPConnector"):
                ok = await refresh_feeds([_feed("aaa111")], HERMES)

        assert not ok

    @pytest.mark.asyncio
    async def test_handles_malformed_payload(self) -> None:
        feed = _feed("aaa111")
        data = _make_pyth_response(
            [{"id": "aaa111", "price": {"price": "not-a-number", "expo": -8, "publish_time": NOW}}]
        )

        with patch("dsc_engine.oracles.pyth.aiohttp.ClientSession", return_value=_mock_session(data=data)):
            with patch("dsc_engine.oracles.pyth.aiohttp.TCPConnector"):
                ok = await refresh_feeds([feed], HERMES)

        assert not ok
        with pytest.raises(StalePrice):
            feed.latest_price()

    @pytest.mark.asyncio
    async def test_no_feeds_is_noop(self) -> None:
        assert await refresh_feeds([], HERMES)
