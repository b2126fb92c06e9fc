"""
Authenticated Bitpanda account API

Wallets, fiat wallets, trades and wallet transactions. Every call is a single
attempt authenticated with the ``X-Api-Key`` header. Failures (missing key,
non-2xx status, undecodable body, transport errors) are logged and turned into
an empty result; nothing raises out of the public methods.

Endpoints used:
  GET wallets
  GET fiatwallets
  GET trades?page_size=&type=&cursor=
  GET wallets/transactions?page_size=&type=&status=&cursor=
  GET fiatwallets/transactions?page_size=&type=&status=&cursor=
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from panda_explorer.config import settings
from panda_explorer.constants import CATEGORY_CRYPTO, CATEGORY_FIAT, DEFAULT_PAGE_SIZE
from panda_explorer.credentials import CredentialContext
from panda_explorer.exceptions import (
    AppError,
    MalformedResponseError,
    MissingCredentialError,
    UpstreamUnavailableError,
)
from panda_explorer.models import Page, PageRequest, Trade, Transaction, Wallet
from panda_explorer.parsing import (
    parse_bool,
    parse_decimal,
    parse_int,
    parse_optional_decimal,
    parse_unix_time,
)
from panda_explorer.schemas.envelope import JsonApiEnvelope, JsonApiResource

logger = logging.getLogger(__name__)


def build_query(request: PageRequest) -> Dict[str, Any]:
    """
    Query parameters for a paginated listing.

    ``page_size`` is always sent; type/status/cursor only when supplied.

    Example:
        PageRequest(kind="buy", cursor="abc", page_size=10)
        -> {"page_size": 10, "type": "buy", "cursor": "abc"}
    """
    params: Dict[str, Any] = {"page_size": request.page_size}
    if request.kind:
        params["type"] = request.kind
    if request.status:
        params["status"] = request.status
    if request.cursor:
        params["cursor"] = request.cursor
    return params


def _unix_of(attributes: Dict[str, Any]):
    time_info = attributes.get("time") or {}
    if not isinstance(time_info, dict):
        time_info = {}
    return parse_unix_time(time_info.get("unix"))


class PortfolioClient:
    """Bitpanda account API client bound to a CredentialContext"""

    def __init__(
        self,
        credentials: CredentialContext,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        reference_currency: Optional[str] = None,
    ):
        self.credentials = credentials
        self.base_url = base_url or settings.bitpanda_base_url
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.reference_currency = (reference_currency or settings.reference_currency).upper()

    # ===== Transport =====

    async def _request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> JsonApiEnvelope:
        """
        GET an authenticated endpoint and decode the JSON:API envelope.

        Raises:
            MissingCredentialError: no key configured (no request is made)
            UpstreamUnavailableError: non-2xx status
            MalformedResponseError: body is not a JSON:API envelope
        """
        if not self.credentials.has_credential():
            raise MissingCredentialError()

        headers = {
            "Accept": "application/json",
            "X-Api-Key": self.credentials.secret.strip(),
        }

        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            response = await client.get(endpoint, headers=headers, params=params)

        if not response.is_success:
            raise UpstreamUnavailableError(
                f"Bitpanda API error: HTTP {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            return JsonApiEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise MalformedResponseError(f"Could not parse Bitpanda response for {endpoint}") from e

    async def _fetch(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Optional[JsonApiEnvelope]:
        """_request() that logs and returns None instead of raising"""
        try:
            return await self._request(endpoint, params)
        except AppError as e:
            logger.warning(f"Bitpanda request failed ({endpoint}): {e.message}")
        except httpx.HTTPError as e:
            logger.warning(f"Bitpanda request failed ({endpoint}): {e}")
        except Exception:
            logger.error(f"Unexpected error calling Bitpanda API: {endpoint}", exc_info=True)
        return None

    # ===== Wallets =====

    async def list_crypto_wallets(self) -> List[Wallet]:
        """Non-deleted crypto wallets with a positive balance, largest first"""
        envelope = await self._fetch("wallets")
        if envelope is None or envelope.data is None:
            return []

        wallets = []
        for resource in envelope.data:
            attrs = resource.attributes
            if attrs is None or parse_bool(attrs.get("deleted")):
                continue
            wallet = Wallet(
                id=str(resource.id),
                category=CATEGORY_CRYPTO,
                symbol=attrs.get("cryptocoin_symbol") or "",
                display_name=attrs.get("name") or "",
                balance=parse_decimal(attrs.get("balance")),
                pending_count=parse_int(attrs.get("pending_transactions_count")) or 0,
                is_default=parse_bool(attrs.get("is_default")),
            )
            if wallet.balance > 0:
                wallets.append(wallet)

        wallets.sort(key=lambda w: w.balance, reverse=True)
        return wallets

    async def list_fiat_wallets(self) -> List[Wallet]:
        """All fiat wallets, largest balance first"""
        envelope = await self._fetch("fiatwallets")
        if envelope is None or envelope.data is None:
            return []

        wallets = [
            Wallet(
                id=str(resource.id),
                category=CATEGORY_FIAT,
                symbol=resource.attributes.get("fiat_symbol") or "",
                display_name=resource.attributes.get("name") or "",
                balance=parse_decimal(resource.attributes.get("balance")),
                pending_count=parse_int(resource.attributes.get("pending_transactions_count")) or 0,
                is_default=False,
            )
            for resource in envelope.data
            if resource.attributes is not None
        ]
        wallets.sort(key=lambda w: w.balance, reverse=True)
        return wallets

    # ===== Trades =====

    async def list_trades(
        self,
        side: Optional[str] = None,
        cursor: Optional[str] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Optional[Page[Trade]]:
        """
        One page of trades.

        Returns None when the page could not be fetched, so callers can tell
        a failed request from an empty history.
        """
        query = build_query(PageRequest(kind=side, cursor=cursor, page_size=page_size))
        envelope = await self._fetch("trades", query)
        if envelope is None or envelope.data is None:
            return None

        trades = [self._to_trade(r) for r in envelope.data if r.attributes is not None]
        meta = envelope.meta
        total_count = meta.total_count if meta and meta.total_count is not None else len(trades)
        return Page(
            items=trades,
            total_count=total_count,
            next_cursor=meta.next_cursor if meta else None,
        )

    @staticmethod
    def _to_trade(resource: JsonApiResource) -> Trade:
        attrs = resource.attributes
        return Trade(
            id=str(resource.id),
            side=attrs.get("type") or "",
            status=attrs.get("status") or "",
            crypto_amount=parse_decimal(attrs.get("amount_cryptocoin")),
            fiat_amount=parse_decimal(attrs.get("amount_fiat")),
            price=parse_decimal(attrs.get("price")),
            is_swap=bool(attrs.get("is_swap")),
            occurred_at=_unix_of(attrs),
            cryptocoin_id=str(attrs.get("cryptocoin_id") or ""),
            fiat_id=str(attrs.get("fiat_id") or ""),
            wallet_id=str(attrs.get("wallet_id") or ""),
        )

    # ===== Transactions =====

    async def list_crypto_transactions(
        self,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        cursor: Optional[str] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> List[Transaction]:
        query = build_query(PageRequest(kind=kind, status=status, cursor=cursor, page_size=page_size))
        envelope = await self._fetch("wallets/transactions", query)
        if envelope is None or envelope.data is None:
            return []

        transactions = []
        for resource in envelope.data:
            attrs = resource.attributes
            if attrs is None:
                continue
            transactions.append(Transaction(
                id=str(resource.id),
                category=CATEGORY_CRYPTO,
                kind=attrs.get("type") or "",
                status=attrs.get("status") or "",
                symbol=attrs.get("cryptocoin_symbol") or "",
                amount=parse_decimal(attrs.get("amount")),
                occurred_at=_unix_of(attrs),
                fee=parse_optional_decimal(attrs.get("fee")),
                chain_tx_hash=attrs.get("tx_id") or None,
                confirmations=parse_int(attrs.get("confirmations")),
            ))
        return transactions

    async def list_fiat_transactions(
        self,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        cursor: Optional[str] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> List[Transaction]:
        """Fiat transactions; symbol is always the reference currency"""
        query = build_query(PageRequest(kind=kind, status=status, cursor=cursor, page_size=page_size))
        envelope = await self._fetch("fiatwallets/transactions", query)
        if envelope is None or envelope.data is None:
            return []

        return [
            Transaction(
                id=str(resource.id),
                category=CATEGORY_FIAT,
                kind=resource.attributes.get("type") or "",
                status=resource.attributes.get("status") or "",
                symbol=self.reference_currency,
                amount=parse_decimal(resource.attributes.get("amount")),
                occurred_at=_unix_of(resource.attributes),
                fee=parse_optional_decimal(resource.attributes.get("fee")),
            )
            for resource in envelope.data
            if resource.attributes is not None
        ]

    # ===== Credential check =====

    async def validate_credential(self) -> bool:
        """True iff the cheapest authenticated call returns a well-formed envelope"""
        if not self.credentials.has_credential():
            return False
        envelope = await self._fetch("wallets")
        return envelope is not None
