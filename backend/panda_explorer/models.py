"""
Domain records shared by the API clients, caches and aggregator.

Plain dataclasses with Decimal money fields; the pydantic view objects in
``panda_explorer.schemas`` are built from these.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Generic, List, Mapping, Optional, TypeVar

from panda_explorer.constants import DEFAULT_PAGE_SIZE

T = TypeVar("T")


@dataclass
class Wallet:
    """Crypto or fiat wallet; valuation is filled in by the aggregator"""
    id: str
    category: str  # "crypto" or "fiat"
    symbol: str
    display_name: str
    balance: Decimal
    value_in_reference_currency: Optional[Decimal] = None
    pending_count: int = 0
    is_default: bool = False


@dataclass
class Trade:
    id: str
    side: str  # "buy" or "sell"
    status: str
    crypto_amount: Decimal
    fiat_amount: Decimal
    price: Decimal
    is_swap: bool
    occurred_at: datetime
    cryptocoin_id: str = ""
    fiat_id: str = ""
    wallet_id: str = ""


@dataclass
class Transaction:
    """
    Crypto or fiat wallet transaction, discriminated by ``category``.

    Crypto-only fields (chain_tx_hash, confirmations) stay None for fiat.
    """
    id: str
    category: str
    kind: str
    status: str
    symbol: str
    amount: Decimal
    occurred_at: datetime
    fee: Optional[Decimal] = None
    chain_tx_hash: Optional[str] = None
    confirmations: Optional[int] = None


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total_count: int = 0
    next_cursor: Optional[str] = None


@dataclass(frozen=True)
class PageRequest:
    kind: Optional[str] = None
    status: Optional[str] = None
    cursor: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class PriceSnapshot:
    """
    All ticker prices captured at one instant.

    Never updated in place; a refresh builds a new snapshot and swaps it in.
    """
    prices_by_symbol: Mapping[str, Mapping[str, Decimal]]
    captured_at: datetime

    def __post_init__(self):
        frozen = {
            symbol: MappingProxyType(dict(prices))
            for symbol, prices in self.prices_by_symbol.items()
        }
        object.__setattr__(self, "prices_by_symbol", MappingProxyType(frozen))

    def age_seconds(self, now: datetime) -> float:
        return (now - self.captured_at).total_seconds()

    def price(self, symbol: str, currency: str) -> Optional[Decimal]:
        prices = self.prices_by_symbol.get(symbol)
        if prices is None:
            return None
        return prices.get(currency)


@dataclass
class PricePoint:
    at: datetime
    price: Decimal
    timestamp_ms: int


@dataclass
class HistorySeries:
    symbol: str
    name: str
    currency: str
    days: int
    points: List[PricePoint]
    current: Decimal
    high: Decimal
    low: Decimal
    change_percent: Decimal
    cached_until: Optional[datetime] = None
