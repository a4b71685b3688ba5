"""Orders Bounded Context - Domain Layer.

Exports:
    Entities: Order (Aggregate Root)
    Value Objects: OrderStatus, OrderAction, OrderLineItem, LineDecision,
        OrderDecision, OrderHistoryEntry
    Exceptions: InvalidOrderDecisionError, NotOrderSellerError,
        OrderAlreadyProcessedError
    Events: OrderPlacedEvent, OrderConfirmedEvent, OrderPartiallyFulfilledEvent,
        OrderRejectedEvent
    Repositories: OrderRepository (interface)
"""

from .entities import Order
from .events import (
    OrderConfirmedEvent,
    OrderPartiallyFulfilledEvent,
    OrderPlacedEvent,
    OrderRejectedEvent,
)
from .exceptions import (
    InvalidOrderDecisionError,
    NotOrderSellerError,
    OrderAlreadyProcessedError,
)
from .repositories import OrderRepository
from .value_objects import (
    LineDecision,
    OrderAction,
    OrderDecision,
    OrderHistoryEntry,
    OrderLineItem,
    OrderStatus,
)

__all__ = [
    "Order",
    "OrderStatus",
    "OrderAction",
    "OrderLineItem",
    "LineDecision",
    "OrderDecision",
    "OrderHistoryEntry",
    "InvalidOrderDecisionError",
    "NotOrderSellerError",
    "OrderAlreadyProcessedError",
    "OrderPlacedEvent",
    "OrderConfirmedEvent",
    "OrderPartiallyFulfilledEvent",
    "OrderRejectedEvent",
    "OrderRepository",
]
