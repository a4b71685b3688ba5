"""Events for the Trading bounded context."""

from .trade_events import (
    DeliveryConfirmedEvent,
    ShippingUpdatedEvent,
    TradeAcceptedEvent,
    TradeCancelledEvent,
    TradeCompletedEvent,
    TradeProposedEvent,
    TradeRejectedEvent,
    TradeUpdatedEvent,
)

__all__ = [
    "TradeProposedEvent",
    "TradeUpdatedEvent",
    "TradeAcceptedEvent",
    "TradeRejectedEvent",
    "TradeCancelledEvent",
    "ShippingUpdatedEvent",
    "DeliveryConfirmedEvent",
    "TradeCompletedEvent",
]
