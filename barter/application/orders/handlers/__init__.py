"""Order use case handlers."""

from .fulfillment_handlers import (
    ConfirmOrRejectOrderHandler,
    PlaceOrderHandler,
    ProcessPartialOrderHandler,
)
from .order_query_handlers import GetOrderHistoryHandler, GetPendingConfirmationHandler

__all__ = [
    "PlaceOrderHandler",
    "ConfirmOrRejectOrderHandler",
    "ProcessPartialOrderHandler",
    "GetPendingConfirmationHandler",
    "GetOrderHistoryHandler",
]
