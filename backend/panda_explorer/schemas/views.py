"""
View objects handed to the presentation layer.

Every view carries ``error_message``; ``is_success`` is derived from it so a
view can never be both successful and carrying an error.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ViewBase(BaseModel):
    error_message: Optional[str] = None
    last_updated: datetime = Field(default_factory=_now)

    @computed_field
    @property
    def is_success(self) -> bool:
        return not self.error_message


class AuthenticatedView(ViewBase):
    has_api_key: bool = False


# ----- Ticker -----------------------------------------------------------------


class TickerItem(BaseModel):
    symbol: str
    reference_price: Decimal = Decimal("0")
    price_usd: Decimal = Decimal("0")
    prices: Dict[str, Decimal] = Field(default_factory=dict)


class TickerView(ViewBase):
    items: List[TickerItem] = Field(default_factory=list)
    reference_currency: str = "EUR"

    @computed_field
    @property
    def total_assets(self) -> int:
        return len(self.items)


# ----- Wallets ----------------------------------------------------------------


class WalletItem(BaseModel):
    id: str
    category: str
    symbol: str
    display_name: str
    balance: Decimal
    value_in_reference_currency: Optional[Decimal] = None
    pending_count: int = 0
    is_default: bool = False

    class Config:
        from_attributes = True


class WalletsView(AuthenticatedView):
    crypto_wallets: List[WalletItem] = Field(default_factory=list)
    fiat_wallets: List[WalletItem] = Field(default_factory=list)
    total_value: Decimal = Decimal("0")
    reference_currency: str = "EUR"


# ----- Trades -----------------------------------------------------------------


class TradeItem(BaseModel):
    id: str
    side: str
    status: str
    crypto_amount: Decimal
    fiat_amount: Decimal
    price: Decimal
    is_swap: bool
    occurred_at: datetime
    cryptocoin_id: str = ""
    fiat_id: str = ""
    wallet_id: str = ""

    class Config:
        from_attributes = True


class TradesView(AuthenticatedView):
    trades: List[TradeItem] = Field(default_factory=list)
    total_count: int = 0
    next_cursor: Optional[str] = None
    page_size: int = 25
    type_filter: Optional[str] = None

    @computed_field
    @property
    def has_more_pages(self) -> bool:
        return bool(self.next_cursor)


# ----- Transactions -----------------------------------------------------------


class TransactionItem(BaseModel):
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

    class Config:
        from_attributes = True


class TransactionsView(AuthenticatedView):
    transactions: List[TransactionItem] = Field(default_factory=list)
    total_count: int = 0
    next_cursor: Optional[str] = None
    page_size: int = 25
    type_filter: Optional[str] = None
    status_filter: Optional[str] = None
    category_filter: str = "all"

    @computed_field
    @property
    def has_more_pages(self) -> bool:
        return bool(self.next_cursor)


# ----- Price history ----------------------------------------------------------


class PricePointItem(BaseModel):
    at: datetime
    price: Decimal
    timestamp_ms: int

    class Config:
        from_attributes = True


class PriceHistoryView(ViewBase):
    symbol: str = ""
    name: str = ""
    currency: str = "EUR"
    days: int = 7
    prices: List[PricePointItem] = Field(default_factory=list)
    current_price: Decimal = Decimal("0")
    high_price: Decimal = Decimal("0")
    low_price: Decimal = Decimal("0")
    change_percent: Decimal = Decimal("0")
    cached_until: Optional[datetime] = None


# ----- Staking ----------------------------------------------------------------


class StakingAsset(BaseModel):
    symbol: str
    name: str
    estimated_apy: Decimal
    min_apy: Decimal
    max_apy: Decimal
    lock_period_days: int = 0
    minimum_stake: Decimal = Decimal("0")
    reward_frequency: str = "Weekly"
    staking_type: str = "Proof of Stake"
    description: Optional[str] = None
    available_on_bitpanda: bool = True

    @computed_field
    @property
    def apy_range(self) -> str:
        if self.min_apy == self.max_apy:
            return f"{self.estimated_apy:.1f}%"
        return f"{self.min_apy:.1f}% - {self.max_apy:.1f}%"


class UserStakingHolding(BaseModel):
    symbol: str
    name: str
    balance: Decimal
    value_in_reference_currency: Decimal
    estimated_apy: Decimal
    estimated_annual_reward: Decimal
    estimated_annual_reward_value: Decimal


class StakingView(AuthenticatedView):
    staking_assets: List[StakingAsset] = Field(default_factory=list)
    user_holdings: List[UserStakingHolding] = Field(default_factory=list)
    total_eligible_value: Decimal = Decimal("0")
    estimated_annual_rewards_value: Decimal = Decimal("0")
    disclaimer: str = ""
