"""
Command-line entry point

Usage:
  python -m panda_explorer ticker
  python -m panda_explorer wallets [--api-key KEY]
  python -m panda_explorer trades [--side buy|sell] [--cursor C] [--page-size N]
  python -m panda_explorer transactions [--category all|crypto|fiat] [--type T] [--status S]
  python -m panda_explorer history BTC [--days 7] [--currency eur]
  python -m panda_explorer staking
  python -m panda_explorer validate

Prints the resulting view as JSON; exits 1 when the view carries an error.
"""

import argparse
import asyncio
import json
import logging
import sys

from panda_explorer.coingecko_api.history import HistoryCache
from panda_explorer.config import settings
from panda_explorer.constants import (
    DEFAULT_PAGE_SIZE,
    TRADE_SIDES,
    TRANSACTION_CATEGORIES,
    TRANSACTION_KINDS,
    TRANSACTION_STATUSES,
)
from panda_explorer.services.portfolio_aggregator import PortfolioAggregator, create_context
from panda_explorer.services.staking_service import get_staking_overview


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="panda_explorer", description="Bitpanda portfolio explorer")
    parser.add_argument("--api-key", help="Bitpanda API key (overrides BITPANDA_API_KEY)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("ticker", help="Live prices for every asset")
    sub.add_parser("wallets", help="Wallet balances with valuation")

    trades = sub.add_parser("trades", help="Trade history")
    trades.add_argument("--side", choices=TRADE_SIDES)
    trades.add_argument("--cursor")
    trades.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE)

    txs = sub.add_parser("transactions", help="Crypto and fiat transactions")
    txs.add_argument("--category", choices=TRANSACTION_CATEGORIES, default="all")
    txs.add_argument("--type", dest="kind", choices=TRANSACTION_KINDS)
    txs.add_argument("--status", choices=TRANSACTION_STATUSES)
    txs.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE)

    history = sub.add_parser("history", help="Historical price series")
    history.add_argument("symbol")
    history.add_argument("--days", type=int, default=7)
    history.add_argument("--currency", default="eur")

    sub.add_parser("staking", help="Staking catalogue and eligible holdings")
    sub.add_parser("validate", help="Check that the API key works")
    return parser


async def run(args: argparse.Namespace) -> bool:
    aggregator = PortfolioAggregator(create_context(api_key=args.api_key))

    if args.command == "validate":
        valid = await aggregator.validate_credential()
        print(json.dumps({"valid": valid}))
        return valid

    if args.command == "ticker":
        view = await aggregator.get_ticker()
    elif args.command == "wallets":
        view = await aggregator.get_wallets()
    elif args.command == "trades":
        view = await aggregator.get_trades(side=args.side, cursor=args.cursor, page_size=args.page_size)
    elif args.command == "transactions":
        view = await aggregator.get_transactions(
            category=args.category, kind=args.kind, status=args.status, page_size=args.page_size
        )
    elif args.command == "history":
        view = await HistoryCache().price_history(args.symbol, days=args.days, currency=args.currency)
    else:
        view = await get_staking_overview(aggregator)

    print(view.model_dump_json(indent=2))
    return view.is_success


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    ok = asyncio.run(run(args))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
