from .envelope import JsonApiEnvelope, JsonApiMeta, JsonApiResource, MarketChartPayload, TickerPayload
from .views import (
    PriceHistoryView,
    PricePointItem,
    StakingAsset,
    StakingView,
    TickerItem,
    TickerView,
    TradeItem,
    TradesView,
    TransactionItem,
    TransactionsView,
    UserStakingHolding,
    WalletItem,
    WalletsView,
)

__all__ = [
    "JsonApiEnvelope",
    "JsonApiMeta",
    "JsonApiResource",
    "MarketChartPayload",
    "TickerPayload",
    "PriceHistoryView",
    "PricePointItem",
    "StakingAsset",
    "StakingView",
    "TickerItem",
    "TickerView",
    "TradeItem",
    "TradesView",
    "TransactionItem",
    "TransactionsView",
    "UserStakingHolding",
    "WalletItem",
    "WalletsView",
]
