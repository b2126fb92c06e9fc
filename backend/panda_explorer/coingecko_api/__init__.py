"""
CoinGecko API Integration

Public market-chart history with symbol mapping and a bucketed-TTL cache.
"""

from panda_explorer.coingecko_api.history import HistoryCache, history_ttl_seconds

__all__ = ["HistoryCache", "history_ttl_seconds"]
