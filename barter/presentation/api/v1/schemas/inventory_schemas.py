"""Pydantic schemas for inventory responses."""

from datetime import datetime
from decimal import Decimal

from .common import ApiResponse, CamelModel
from .trade_schemas import TradeSchema


class ProductSchema(CamelModel):
    """An inventory record; provenance fields are null for listed products."""

    id: int
    owner_id: int
    name: str
    category: str | None
    unit_price: Decimal
    stock: int
    available_for_trade: bool
    source_product_id: int | None
    origin_trade_id: int | None
    acquired_date: datetime | None


class ProductResponse(ApiResponse):
    product: ProductSchema


class ProductListResponse(ApiResponse):
    products: list[ProductSchema]


class ProductTradeHistoryResponse(ApiResponse):
    product_id: int
    trades: list[TradeSchema]
