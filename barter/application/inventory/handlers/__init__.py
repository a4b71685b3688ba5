"""Inventory use case handlers."""

from .inventory_handlers import (
    GetProductsForTradeHandler,
    GetProductTradeHistoryHandler,
    GetReceivedProductsHandler,
    GetUserProductsHandler,
    SetTradeAvailabilityHandler,
)

__all__ = [
    "SetTradeAvailabilityHandler",
    "GetUserProductsHandler",
    "GetProductsForTradeHandler",
    "GetReceivedProductsHandler",
    "GetProductTradeHistoryHandler",
]
