"""Events for the Orders bounded context."""

from .order_events import (
    OrderConfirmedEvent,
    OrderPartiallyFulfilledEvent,
    OrderPlacedEvent,
    OrderRejectedEvent,
)

__all__ = [
    "OrderPlacedEvent",
    "OrderConfirmedEvent",
    "OrderPartiallyFulfilledEvent",
    "OrderRejectedEvent",
]
