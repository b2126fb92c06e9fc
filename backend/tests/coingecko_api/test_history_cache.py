"""
Tests for backend/panda_explorer/coingecko_api/history.py

Covers symbol mapping, TTL buckets, point parsing, series statistics and
the cache / no-negative-caching behaviour of price_history().
"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from panda_explorer.cache import SimpleCache, utc_now
from panda_explorer.coingecko_api.history import (
    HistoryCache,
    build_series,
    cache_key,
    history_ttl_seconds,
    parse_price_points,
)
from panda_explorer.schemas.envelope import MarketChartPayload

ASYNC_CLIENT = "panda_explorer.coingecko_api.history.httpx.AsyncClient"


# ---------------------------------------------------------------------------
# Symbol mapping
# ---------------------------------------------------------------------------


class TestIdFor:
    """Tests for HistoryCache.id_for()"""

    def test_upper_case(self):
        assert HistoryCache.id_for("BTC") == "bitcoin"

    def test_case_insensitive(self):
        assert HistoryCache.id_for("btc") == "bitcoin"
        assert HistoryCache.id_for("Avax") == "avalanche-2"

    def test_unknown_symbol(self):
        assert HistoryCache.id_for("NOTACOIN") is None

    def test_name_for(self):
        assert HistoryCache.name_for("xau") == "Gold (PAXG)"

    def test_supported_symbols(self):
        symbols = HistoryCache.supported_symbols()
        assert len(symbols) == 37
        assert "BEST" in symbols
        assert symbols == sorted(symbols)


# ---------------------------------------------------------------------------
# TTL buckets
# ---------------------------------------------------------------------------


class TestHistoryTtl:
    """Tests for history_ttl_seconds()"""

    @pytest.mark.parametrize("days,minutes", [(1, 5), (7, 15), (30, 30), (365, 60), (90, 60), (14, 60)])
    def test_buckets(self, days, minutes):
        assert history_ttl_seconds(days) == minutes * 60

    def test_cache_key_normalises_case(self):
        assert cache_key("btc", 7, "EUR") == "BTC:7:eur"


# ---------------------------------------------------------------------------
# Parsing / statistics
# ---------------------------------------------------------------------------


class TestParsePricePoints:
    """Tests for parse_price_points()"""

    def test_sorts_and_drops_malformed(self, sample_market_chart):
        points = parse_price_points(sample_market_chart["prices"])
        assert [p.price for p in points] == [Decimal("100.0"), Decimal("110.0"), Decimal("120.0")]
        assert points[0].timestamp_ms == 1704067200000
        assert points[0].at.year == 2024

    def test_non_numeric_fields_dropped(self):
        rows = [[1704067200000, "abc"], ["soon", 5], [True, 1], None, [1704067200000, 7]]
        points = parse_price_points(rows)
        assert len(points) == 1
        assert points[0].price == Decimal("7")


class TestBuildSeries:
    """Tests for build_series()"""

    def test_statistics(self, sample_market_chart):
        points = parse_price_points(sample_market_chart["prices"])
        series = build_series("btc", "Bitcoin", "eur", 7, points)

        assert series.symbol == "BTC"
        assert series.currency == "EUR"
        assert series.current == Decimal("120.0")
        assert series.high == Decimal("120.0")
        assert series.low == Decimal("100.0")
        assert series.change_percent == Decimal("20")

    def test_zero_first_price_leaves_change_at_zero(self):
        """Edge case: no division by zero when the first price is 0."""
        points = parse_price_points([[1, 0], [2, 5]])
        series = build_series("BTC", "Bitcoin", "eur", 1, points)
        assert series.change_percent == Decimal("0")
        assert series.current == Decimal("5")


# ---------------------------------------------------------------------------
# price_history
# ---------------------------------------------------------------------------


class TestPriceHistory:
    """Tests for HistoryCache.price_history()"""

    @pytest.mark.asyncio
    async def test_happy_path(self, make_response, make_async_client, sample_market_chart):
        mock_client = make_async_client(make_response(200, sample_market_chart))
        history = HistoryCache(user_agent="PandaExplorer/1.0")

        with patch(ASYNC_CLIENT, return_value=mock_client):
            view = await history.price_history("btc", days=7, currency="EUR")

        assert view.is_success is True
        assert view.symbol == "BTC"
        assert view.name == "Bitcoin"
        assert view.currency == "EUR"
        assert len(view.prices) == 3
        assert view.current_price == Decimal("120.0")
        assert view.change_percent == Decimal("20")
        assert view.cached_until is not None

        call = mock_client.get.call_args
        assert call.args[0] == "coins/bitcoin/market_chart"
        assert call.kwargs["params"] == {"vs_currency": "eur", "days": 7}
        assert call.kwargs["headers"]["User-Agent"] == "PandaExplorer/1.0"

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, sample_market_chart):
        """Happy path: same (symbol, days, currency) does not refetch."""
        history = HistoryCache()
        fetch = AsyncMock(return_value=MarketChartPayload.model_validate(sample_market_chart))

        with patch.object(history, "_fetch_market_chart", new=fetch):
            first = await history.price_history("BTC", 30, "eur")
            second = await history.price_history("btc", 30, "EUR")

        assert fetch.await_count == 1
        assert first.prices == second.prices
        assert first.cached_until == second.cached_until

    @pytest.mark.asyncio
    async def test_different_days_are_separate_entries(self, sample_market_chart):
        history = HistoryCache()
        fetch = AsyncMock(return_value=MarketChartPayload.model_validate(sample_market_chart))

        with patch.object(history, "_fetch_market_chart", new=fetch):
            await history.price_history("BTC", 1, "eur")
            await history.price_history("BTC", 7, "eur")

        assert fetch.await_count == 2

    @pytest.mark.parametrize("days,minutes", [(1, 5), (30, 30), (365, 60)])
    @pytest.mark.asyncio
    async def test_entry_expiry_follows_bucket(self, sample_market_chart, days, minutes):
        """Edge case: cached_until is now + the bucketed TTL."""
        cache = SimpleCache()
        history = HistoryCache(cache=cache)
        fetch = AsyncMock(return_value=MarketChartPayload.model_validate(sample_market_chart))

        before = utc_now()
        with patch.object(history, "_fetch_market_chart", new=fetch):
            view = await history.price_history("ETH", days, "eur")
        after = utc_now()

        ttl = timedelta(minutes=minutes)
        assert before + ttl <= view.cached_until <= after + ttl
        entry = cache._cache[cache_key("ETH", days, "eur")]
        assert entry.expires_at == view.cached_until

    @pytest.mark.asyncio
    async def test_expired_entry_refetches(self, sample_market_chart):
        """Edge case: after the TTL the series is fetched again."""
        cache = SimpleCache()
        history = HistoryCache(cache=cache)
        fetch = AsyncMock(return_value=MarketChartPayload.model_validate(sample_market_chart))

        with patch.object(history, "_fetch_market_chart", new=fetch):
            await history.price_history("BTC", 1, "eur")
            cache._cache["BTC:1:eur"].expires_at = utc_now() - timedelta(seconds=1)
            await history.price_history("BTC", 1, "eur")

        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_unsupported_symbol(self):
        """Failure: unmapped symbol -> error view, no request, nothing cached."""
        cache = SimpleCache()
        history = HistoryCache(cache=cache)

        with patch(ASYNC_CLIENT) as factory:
            view = await history.price_history("NOTACOIN", 7, "eur")

        factory.assert_not_called()
        assert view.is_success is False
        assert "not supported" in view.error_message
        assert view.symbol == "NOTACOIN"
        assert cache._cache == {}

    @pytest.mark.asyncio
    async def test_upstream_error_not_cached(self, make_response, make_async_client, sample_market_chart):
        """Failure: a 429 yields an error view and the next call retries."""
        mock_client = make_async_client(make_response(429, None), make_response(200, sample_market_chart))
        cache = SimpleCache()
        history = HistoryCache(cache=cache)

        with patch(ASYNC_CLIENT, return_value=mock_client):
            failed = await history.price_history("BTC", 7, "eur")
            assert cache._cache == {}
            recovered = await history.price_history("BTC", 7, "eur")

        assert failed.is_success is False
        assert "HTTP 429" in failed.error_message
        assert recovered.is_success is True
        assert mock_client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_empty_prices(self, make_response, make_async_client):
        mock_client = make_async_client(make_response(200, {"prices": []}))
        history = HistoryCache()

        with patch(ASYNC_CLIENT, return_value=mock_client):
            view = await history.price_history("BTC", 7, "eur")

        assert view.is_success is False
        assert view.error_message == "No price data available"

    @pytest.mark.asyncio
    async def test_malformed_body(self, make_response, make_async_client):
        mock_client = make_async_client(make_response(200, json_error=ValueError("truncated")))
        history = HistoryCache()

        with patch(ASYNC_CLIENT, return_value=mock_client):
            view = await history.price_history("BTC", 7, "eur")

        assert view.is_success is False
        assert view.prices == []

    @pytest.mark.asyncio
    async def test_transport_error(self, make_async_client):
        mock_client = make_async_client(side_effect=httpx.ConnectTimeout("timeout"))
        history = HistoryCache()

        with patch(ASYNC_CLIENT, return_value=mock_client):
            view = await history.price_history("BTC", 7, "eur")

        assert view.is_success is False
        assert view.error_message.startswith("Market data unavailable")
