"""
Portfolio Aggregator

Joins the Bitpanda account client and the ticker snapshot into the views the
presentation layer renders: wallets with EUR valuation and portfolio total,
trades, merged crypto/fiat transactions and the live ticker.

Every public coroutine returns a view; errors end up in ``error_message``.
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from panda_explorer.bitpanda_api.client import PortfolioClient
from panda_explorer.bitpanda_api.ticker import MarketSnapshotCache
from panda_explorer.config import settings
from panda_explorer.constants import (
    CATEGORY_ALL,
    CATEGORY_CRYPTO,
    CATEGORY_FIAT,
    DEFAULT_PAGE_SIZE,
    TRANSACTION_CATEGORIES,
)
from panda_explorer.credentials import CredentialContext
from panda_explorer.exceptions import MissingCredentialError, describe_error
from panda_explorer.models import Transaction, Wallet
from panda_explorer.parsing import ZERO
from panda_explorer.schemas.views import (
    TickerView,
    TradeItem,
    TradesView,
    TransactionItem,
    TransactionsView,
    WalletItem,
    WalletsView,
)

logger = logging.getLogger(__name__)

NOT_CONFIGURED = MissingCredentialError().message


@dataclass
class ExplorerContext:
    """
    Process-wide state shared by every aggregator call.

    Lives as long as the host process; nothing is persisted.
    """
    credentials: CredentialContext
    portfolio_client: PortfolioClient
    snapshot_cache: MarketSnapshotCache
    reference_currency: str


def create_context(api_key: Optional[str] = None) -> ExplorerContext:
    """Build a context from settings, optionally overriding the API key"""
    credentials = CredentialContext(api_key if api_key is not None else settings.bitpanda_api_key)
    reference_currency = settings.reference_currency
    return ExplorerContext(
        credentials=credentials,
        portfolio_client=PortfolioClient(credentials, reference_currency=reference_currency),
        snapshot_cache=MarketSnapshotCache(reference_currency=reference_currency),
        reference_currency=reference_currency,
    )


class PortfolioAggregator:
    def __init__(self, context: ExplorerContext):
        self.context = context

    @property
    def credentials(self) -> CredentialContext:
        return self.context.credentials

    def has_credential(self) -> bool:
        return self.credentials.has_credential()

    def set_credential(self, value: Optional[str]):
        self.credentials.set_credential(value)

    # ===== Ticker =====

    async def get_ticker(self) -> TickerView:
        return await self.context.snapshot_cache.refresh()

    # ===== Wallets =====

    async def get_wallets(self) -> WalletsView:
        """
        Crypto and fiat wallets valued in the reference currency.

        Wallet listings and the ticker are fetched concurrently; valuation
        starts only once all three have finished.
        """
        reference = self.context.reference_currency
        if not self.has_credential():
            return WalletsView(has_api_key=False, error_message=NOT_CONFIGURED, reference_currency=reference)

        client = self.context.portfolio_client
        snapshot_cache = self.context.snapshot_cache
        try:
            crypto_wallets, fiat_wallets, _ticker = await asyncio.gather(
                client.list_crypto_wallets(),
                client.list_fiat_wallets(),
                snapshot_cache.refresh(),
            )

            for wallet in crypto_wallets:
                price = await snapshot_cache.price_of(wallet.symbol, reference)
                wallet.value_in_reference_currency = wallet.balance * price

            for wallet in fiat_wallets:
                # Non-reference fiat is not converted
                wallet.value_in_reference_currency = (
                    wallet.balance if wallet.symbol.upper() == reference else ZERO
                )

            total = self._sum_values(crypto_wallets) + self._sum_values(fiat_wallets)
        except Exception as e:
            logger.error("Error fetching wallets", exc_info=True)
            return WalletsView(has_api_key=True, error_message=describe_error(e), reference_currency=reference)

        return WalletsView(
            has_api_key=True,
            crypto_wallets=[WalletItem.model_validate(w) for w in crypto_wallets],
            fiat_wallets=[WalletItem.model_validate(w) for w in fiat_wallets],
            total_value=total,
            reference_currency=reference,
        )

    @staticmethod
    def _sum_values(wallets: List[Wallet]) -> Decimal:
        return sum((w.value_in_reference_currency or ZERO for w in wallets), ZERO)

    async def total_portfolio_value(self) -> Decimal:
        view = await self.get_wallets()
        return view.total_value

    # ===== Trades =====

    async def get_trades(
        self,
        side: Optional[str] = None,
        cursor: Optional[str] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TradesView:
        view_args = {"type_filter": side, "page_size": page_size}
        if not self.has_credential():
            return TradesView(has_api_key=False, error_message=NOT_CONFIGURED, **view_args)

        try:
            page = await self.context.portfolio_client.list_trades(side=side, cursor=cursor, page_size=page_size)
        except Exception as e:
            logger.error("Error fetching trades", exc_info=True)
            return TradesView(has_api_key=True, error_message=describe_error(e), **view_args)

        if page is None:
            return TradesView(has_api_key=True, error_message="Could not fetch trades", **view_args)

        return TradesView(
            has_api_key=True,
            trades=[TradeItem.model_validate(t) for t in page.items],
            total_count=page.total_count,
            next_cursor=page.next_cursor,
            **view_args,
        )

    # ===== Transactions =====

    async def get_transactions(
        self,
        category: str = CATEGORY_ALL,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TransactionsView:
        """
        Crypto and/or fiat transactions, newest first.

        With category "all" both sources are fetched and the merged list is
        cut to ``page_size``, so each source may be under-represented. A
        non-positive ``page_size`` yields no rows.
        """
        view_args = {
            "category_filter": category,
            "type_filter": kind,
            "status_filter": status,
            "page_size": page_size,
        }
        if not self.has_credential():
            return TransactionsView(has_api_key=False, error_message=NOT_CONFIGURED, **view_args)

        if category not in TRANSACTION_CATEGORIES:
            return TransactionsView(
                has_api_key=True,
                error_message=f"Unknown transaction category '{category}'",
                **view_args,
            )

        client = self.context.portfolio_client
        fetches = []
        if category in (CATEGORY_ALL, CATEGORY_CRYPTO):
            fetches.append(client.list_crypto_transactions(kind, status, None, page_size))
        if category in (CATEGORY_ALL, CATEGORY_FIAT):
            fetches.append(client.list_fiat_transactions(kind, status, None, page_size))

        try:
            results = await asyncio.gather(*fetches)
        except Exception as e:
            logger.error("Error fetching transactions", exc_info=True)
            return TransactionsView(has_api_key=True, error_message=describe_error(e), **view_args)

        merged: List[Transaction] = [tx for result in results for tx in result]
        merged.sort(key=lambda tx: tx.occurred_at, reverse=True)
        merged = merged[:max(page_size, 0)]

        return TransactionsView(
            has_api_key=True,
            transactions=[TransactionItem.model_validate(tx) for tx in merged],
            total_count=len(merged),
            **view_args,
        )

    # ===== Credential =====

    async def validate_credential(self) -> bool:
        if not self.has_credential():
            return False
        return await self.context.portfolio_client.validate_credential()
