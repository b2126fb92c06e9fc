"""Pydantic models for upstream response bodies"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, RootModel


class JsonApiResource(BaseModel):
    type: str = ""
    id: Any = ""
    attributes: Optional[Dict[str, Any]] = None


class JsonApiMeta(BaseModel):
    total_count: Optional[int] = None
    next_cursor: Optional[str] = None
    page_size: Optional[int] = None


class JsonApiEnvelope(BaseModel):
    """Bitpanda's ``{data: [{type, id, attributes}], meta}`` wrapper"""
    data: Optional[List[JsonApiResource]] = None
    meta: Optional[JsonApiMeta] = None


class TickerPayload(RootModel[Dict[str, Dict[str, Any]]]):
    """``{symbol: {currency: price_string}}`` from Bitpanda's ticker"""


class MarketChartPayload(BaseModel):
    """CoinGecko market_chart body; only ``prices`` is used"""
    prices: Optional[List[List[Any]]] = None
    market_caps: Optional[List[List[Any]]] = None
    total_volumes: Optional[List[List[Any]]] = None
