"""
Historical price series from CoinGecko's public market_chart endpoint.

Bitpanda symbols are mapped to CoinGecko ids through the static SYMBOL_MAPPING
table. Successful series are cached per (symbol, days, currency) with a TTL
bucketed by the requested day range; failures are never cached.

Endpoint used:
  GET coins/{id}/market_chart?vs_currency={currency}&days={days}
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from panda_explorer.cache import SimpleCache
from panda_explorer.config import settings
from panda_explorer.constants import HISTORY_CACHE_TTL_BY_DAYS, HISTORY_CACHE_TTL_DEFAULT, SYMBOL_MAPPING
from panda_explorer.exceptions import (
    AppError,
    MalformedResponseError,
    UnsupportedSymbolError,
    UpstreamUnavailableError,
    describe_error,
)
from panda_explorer.models import HistorySeries, PricePoint
from panda_explorer.parsing import ZERO, parse_epoch_ms
from panda_explorer.schemas.envelope import MarketChartPayload
from panda_explorer.schemas.views import PriceHistoryView, PricePointItem

logger = logging.getLogger(__name__)


def history_ttl_seconds(days: int) -> int:
    """Cache lifetime for a series: 1d -> 5 min, 7d -> 15 min, 30d -> 30 min, else 60 min"""
    return HISTORY_CACHE_TTL_BY_DAYS.get(days, HISTORY_CACHE_TTL_DEFAULT)


def cache_key(symbol: str, days: int, currency: str) -> str:
    return f"{symbol.upper()}:{days}:{currency.lower()}"


def _as_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, str)):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def parse_price_points(raw_prices: List[List[Any]]) -> List[PricePoint]:
    """[[timestamp_ms, price], ...] -> PricePoints sorted by time, malformed rows dropped"""
    points = []
    for row in raw_prices:
        if not isinstance(row, (list, tuple)) or len(row) < 2:
            continue
        timestamp = _as_number(row[0])
        price = _as_number(row[1])
        if timestamp is None or price is None:
            continue
        at = parse_epoch_ms(int(timestamp))
        if at is None:
            continue
        points.append(PricePoint(at=at, price=price, timestamp_ms=int(timestamp)))

    points.sort(key=lambda p: p.at)
    return points


def build_series(symbol: str, name: str, currency: str, days: int, points: List[PricePoint]) -> HistorySeries:
    """
    Summary statistics over an ordered, non-empty series.

    change_percent stays 0 when the first price is 0.
    """
    prices = [p.price for p in points]
    first = prices[0]
    current = prices[-1]
    change_percent = (current - first) / first * 100 if first != 0 else ZERO

    return HistorySeries(
        symbol=symbol.upper(),
        name=name,
        currency=currency.upper(),
        days=days,
        points=points,
        current=current,
        high=max(prices),
        low=min(prices),
        change_percent=change_percent,
    )


class HistoryCache:
    """Symbol mapping plus TTL-bucketed cache of CoinGecko price series"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        cache: Optional[SimpleCache] = None,
    ):
        self.base_url = base_url or settings.coingecko_base_url
        self.user_agent = user_agent or settings.coingecko_user_agent
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._cache = cache if cache is not None else SimpleCache()

    # ===== Symbol mapping =====

    @staticmethod
    def id_for(symbol: str) -> Optional[str]:
        """CoinGecko id for a Bitpanda symbol (case-insensitive), None if unknown"""
        info = SYMBOL_MAPPING.get(symbol.upper())
        return info[0] if info else None

    @staticmethod
    def name_for(symbol: str) -> Optional[str]:
        info = SYMBOL_MAPPING.get(symbol.upper())
        return info[1] if info else None

    @staticmethod
    def supported_symbols() -> List[str]:
        return sorted(SYMBOL_MAPPING)

    # ===== Fetching =====

    async def _fetch_market_chart(self, coin_id: str, currency: str, days: int) -> MarketChartPayload:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        params = {"vs_currency": currency.lower(), "days": days}

        logger.info(f"Fetching price history: coins/{coin_id}/market_chart {params}")
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            response = await client.get(f"coins/{coin_id}/market_chart", headers=headers, params=params)

        if not response.is_success:
            raise UpstreamUnavailableError(
                f"CoinGecko error: HTTP {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            return MarketChartPayload.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise MalformedResponseError("Could not parse CoinGecko response") from e

    async def get_series(self, symbol: str, days: int = 7, currency: str = "eur") -> HistorySeries:
        """
        Cached series for (symbol, days, currency), fetching on miss.

        Raises:
            UnsupportedSymbolError: no CoinGecko mapping (nothing cached)
            UpstreamUnavailableError / MalformedResponseError: fetch failed
            httpx.HTTPError: transport failure
        """
        key = cache_key(symbol, days, currency)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug(f"Using cached price history for {key}")
            return cached

        coin_id = self.id_for(symbol)
        if coin_id is None:
            raise UnsupportedSymbolError(symbol)

        payload = await self._fetch_market_chart(coin_id, currency, days)
        points = parse_price_points(payload.prices or [])
        if not points:
            raise MalformedResponseError("No price data available")

        series = build_series(symbol, self.name_for(symbol) or "", currency, days, points)

        series.cached_until = await self._cache.set(key, series, history_ttl_seconds(days))

        logger.info(f"Fetched {len(points)} price points for {series.symbol} ({days}d, {series.currency})")
        return series

    async def price_history(self, symbol: str, days: int = 7, currency: str = "eur") -> PriceHistoryView:
        """Price history view; failures become the view's error_message"""
        try:
            series = await self.get_series(symbol, days, currency)
        except AppError as e:
            logger.warning(f"Price history for {symbol} unavailable: {e.message}")
            return self._error_view(symbol, days, currency, e.message)
        except httpx.HTTPError as e:
            logger.warning(f"Price history for {symbol} unavailable: {e}")
            return self._error_view(symbol, days, currency, f"Market data unavailable: {e}")
        except Exception as e:
            logger.error(f"Error fetching price history for {symbol}", exc_info=True)
            return self._error_view(symbol, days, currency, describe_error(e))

        return PriceHistoryView(
            symbol=series.symbol,
            name=series.name,
            currency=series.currency,
            days=series.days,
            prices=[PricePointItem.model_validate(p) for p in series.points],
            current_price=series.current,
            high_price=series.high,
            low_price=series.low,
            change_percent=series.change_percent,
            cached_until=series.cached_until,
        )

    def _error_view(self, symbol: str, days: int, currency: str, message: str) -> PriceHistoryView:
        return PriceHistoryView(
            symbol=symbol.upper(),
            name=self.name_for(symbol) or "",
            currency=currency.upper(),
            days=days,
            error_message=message,
        )
