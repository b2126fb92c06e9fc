"""
Shared test fixtures for the panda_explorer tests.

Provides reusable fixtures for:
- Mock httpx responses and AsyncClient context managers
- Credential contexts with and without an API key
- Sample Bitpanda / CoinGecko payloads
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from panda_explorer.credentials import CredentialContext


# ---------------------------------------------------------------------------
# httpx mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def make_response():
    """Build a mock httpx.Response with a status code and JSON body."""
    def _make(status_code=200, json_body=None, json_error=None):
        response = MagicMock()
        response.status_code = status_code
        response.is_success = 200 <= status_code < 300
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = json_body
        return response
    return _make


@pytest.fixture
def make_async_client():
    """Build a mock httpx.AsyncClient whose get() yields the given responses in order."""
    def _make(*responses, side_effect=None):
        client = AsyncMock()
        if side_effect is not None:
            client.get.side_effect = side_effect
        elif len(responses) == 1:
            client.get.return_value = responses[0]
        else:
            client.get.side_effect = list(responses)
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=False)
        return client
    return _make


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@pytest.fixture
def credentials():
    return CredentialContext("test-api-key")


@pytest.fixture
def no_credentials():
    return CredentialContext(None)


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def ticker_payload():
    return {
        "BTC": {"EUR": "50000.00", "USD": "54000.00", "CHF": "48000.00"},
        "ETH": {"EUR": "3000.50", "USD": "3250.00"},
        "XRP": {"EUR": "0.50", "USD": "0.55"},
    }


@pytest.fixture
def crypto_wallets_payload():
    return {
        "data": [
            {
                "type": "wallet",
                "id": "w-btc",
                "attributes": {
                    "cryptocoin_id": "1",
                    "cryptocoin_symbol": "BTC",
                    "balance": "2.00000000",
                    "is_default": True,
                    "name": "BTC Wallet",
                    "pending_transactions_count": 0,
                    "deleted": False,
                },
            },
            {
                "type": "wallet",
                "id": "w-eth",
                "attributes": {
                    "cryptocoin_id": "5",
                    "cryptocoin_symbol": "ETH",
                    "balance": "10.5",
                    "is_default": False,
                    "name": "ETH Wallet",
                    "pending_transactions_count": 2,
                    "deleted": False,
                },
            },
            {
                "type": "wallet",
                "id": "w-empty",
                "attributes": {
                    "cryptocoin_symbol": "XRP",
                    "balance": "0.00000000",
                    "name": "XRP Wallet",
                    "deleted": False,
                },
            },
            {
                "type": "wallet",
                "id": "w-deleted",
                "attributes": {
                    "cryptocoin_symbol": "ADA",
                    "balance": "100",
                    "name": "Old ADA",
                    "deleted": True,
                },
            },
        ]
    }


@pytest.fixture
def fiat_wallets_payload():
    return {
        "data": [
            {
                "type": "fiat_wallet",
                "id": "f-usd",
                "attributes": {
                    "fiat_id": "2",
                    "fiat_symbol": "USD",
                    "balance": "100.00",
                    "name": "USD Wallet",
                    "pending_transactions_count": 0,
                },
            },
            {
                "type": "fiat_wallet",
                "id": "f-eur",
                "attributes": {
                    "fiat_id": "1",
                    "fiat_symbol": "EUR",
                    "balance": "250.75",
                    "name": "EUR Wallet",
                    "pending_transactions_count": 1,
                },
            },
        ]
    }


@pytest.fixture
def trades_payload():
    return {
        "data": [
            {
                "type": "trade",
                "id": "t-1",
                "attributes": {
                    "status": "finished",
                    "type": "buy",
                    "cryptocoin_id": "1",
                    "fiat_id": "1",
                    "amount_fiat": "1000.00",
                    "amount_cryptocoin": "0.02",
                    "price": "50000.00",
                    "is_swap": False,
                    "wallet_id": "w-btc",
                    "time": {"date_iso8601": "2024-01-01T00:00:00+00:00", "unix": "1704067200"},
                },
            },
            {
                "type": "trade",
                "id": "t-2",
                "attributes": {
                    "status": "finished",
                    "type": "sell",
                    "amount_fiat": "not-a-number",
                    "amount_cryptocoin": "1.5",
                    "price": "3000",
                    "is_swap": True,
                    "time": {"unix": "1704153600"},
                },
            },
        ],
        "meta": {"total_count": 42, "next_cursor": "next-abc", "page_size": 25},
    }


@pytest.fixture
def sample_market_chart():
    """CoinGecko market_chart body with one malformed row."""
    return {
        "prices": [
            [1704153600000, 110.0],
            [1704067200000, 100.0],
            [1704240000000],
            [1704326400000, 120.0],
        ],
        "market_caps": [],
        "total_volumes": [],
    }
