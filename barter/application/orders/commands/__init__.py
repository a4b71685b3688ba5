"""Order commands (write operations)."""

from .place_order import OrderItemRequest, PlaceOrderCommand
from .process_order import (
    ConfirmOrRejectOrderCommand,
    PartialLineRequest,
    ProcessPartialOrderCommand,
)

__all__ = [
    "PlaceOrderCommand",
    "OrderItemRequest",
    "ConfirmOrRejectOrderCommand",
    "ProcessPartialOrderCommand",
    "PartialLineRequest",
]
