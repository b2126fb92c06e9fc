"""
Public Bitpanda ticker with a short-lived price snapshot.

``GET ticker`` returns every asset's price in every supported fiat currency
in one call, so the whole map is cached as a single PriceSnapshot and swapped
out wholesale on refresh. Reads go through ``price_of``, which refreshes
synchronously when the snapshot is missing or older than the TTL.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

import httpx
from pydantic import ValidationError

from panda_explorer.cache import utc_now
from panda_explorer.config import settings
from panda_explorer.exceptions import (
    AppError,
    MalformedResponseError,
    UpstreamUnavailableError,
    describe_error,
)
from panda_explorer.models import PriceSnapshot
from panda_explorer.parsing import ZERO, parse_decimal
from panda_explorer.schemas.envelope import TickerPayload
from panda_explorer.schemas.views import TickerItem, TickerView

logger = logging.getLogger(__name__)


class MarketSnapshotCache:
    def __init__(
        self,
        base_url: Optional[str] = None,
        reference_currency: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url or settings.bitpanda_base_url
        self.reference_currency = (reference_currency or settings.reference_currency).upper()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.ticker_cache_ttl_seconds
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._snapshot: Optional[PriceSnapshot] = None

    @property
    def snapshot(self) -> Optional[PriceSnapshot]:
        return self._snapshot

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        if self._snapshot is None:
            return True
        return self._snapshot.age_seconds(now or utc_now()) >= self.ttl_seconds

    async def _fetch_ticker(self) -> Dict[str, Dict[str, object]]:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            response = await client.get("ticker", headers={"Accept": "application/json"})

        if not response.is_success:
            raise UpstreamUnavailableError(
                f"Ticker request failed: HTTP {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            return TickerPayload.model_validate(response.json()).root
        except (ValueError, ValidationError) as e:
            raise MalformedResponseError("Could not parse ticker response") from e

    async def refresh(self) -> TickerView:
        """
        Fetch the full ticker and replace the snapshot.

        On any failure the previous snapshot is kept and an error view returned.
        """
        try:
            payload = await self._fetch_ticker()
        except AppError as e:
            logger.warning(f"Ticker refresh failed: {e.message}")
            return TickerView(error_message=e.message, reference_currency=self.reference_currency)
        except httpx.HTTPError as e:
            logger.warning(f"Ticker refresh failed: {e}")
            return TickerView(
                error_message=f"Market data unavailable: {e}",
                reference_currency=self.reference_currency,
            )
        except Exception as e:
            logger.error("Error fetching ticker", exc_info=True)
            return TickerView(error_message=describe_error(e), reference_currency=self.reference_currency)

        prices = {
            symbol: {currency.upper(): parse_decimal(value) for currency, value in per_currency.items()}
            for symbol, per_currency in payload.items()
        }
        snapshot = PriceSnapshot(prices_by_symbol=prices, captured_at=utc_now())
        self._snapshot = snapshot

        items = [
            TickerItem(
                symbol=symbol,
                reference_price=per_currency.get(self.reference_currency, ZERO),
                price_usd=per_currency.get("USD", ZERO),
                prices=dict(per_currency),
            )
            for symbol, per_currency in snapshot.prices_by_symbol.items()
        ]
        items.sort(key=lambda item: item.reference_price, reverse=True)
        logger.debug(f"Ticker snapshot refreshed ({len(items)} assets)")

        return TickerView(
            items=items,
            last_updated=snapshot.captured_at,
            reference_currency=self.reference_currency,
        )

    async def price_of(self, symbol: str, currency: Optional[str] = None) -> Decimal:
        """Price of ``symbol`` from the snapshot, refreshing first if stale; 0 if unknown"""
        if self.is_stale():
            await self.refresh()

        snapshot = self._snapshot
        if snapshot is None:
            return ZERO

        currency = (currency or self.reference_currency).upper()
        price = snapshot.price(symbol, currency)
        if price is None:
            price = snapshot.price(symbol.upper(), currency)
        return price if price is not None else ZERO
