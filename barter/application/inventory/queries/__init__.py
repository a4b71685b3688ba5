"""Inventory queries (read operations)."""

from .inventory_queries import (
    GetProductsForTradeQuery,
    GetProductTradeHistoryQuery,
    GetReceivedProductsQuery,
    GetUserProductsQuery,
)

__all__ = [
    "GetUserProductsQuery",
    "GetProductsForTradeQuery",
    "GetReceivedProductsQuery",
    "GetProductTradeHistoryQuery",
]
