"""Value objects for the Orders bounded context."""

from .enums import OrderAction, OrderStatus
from .line_item import LineDecision, OrderDecision, OrderHistoryEntry, OrderLineItem

__all__ = [
    "OrderStatus",
    "OrderAction",
    "OrderLineItem",
    "LineDecision",
    "OrderDecision",
    "OrderHistoryEntry",
]
