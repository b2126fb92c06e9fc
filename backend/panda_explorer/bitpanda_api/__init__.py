"""
Bitpanda API modules
Authenticated account client and public ticker snapshot
"""

from panda_explorer.bitpanda_api.client import PortfolioClient, build_query
from panda_explorer.bitpanda_api.ticker import MarketSnapshotCache

__all__ = ["MarketSnapshotCache", "PortfolioClient", "build_query"]
