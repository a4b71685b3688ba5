"""Trading Bounded Context - Domain Layer.

Exports:
    Entities: Trade (Aggregate Root)
    Value Objects: TradeStatus, ShippingStatus, PartyRole, TradeLine, ShippingInfo,
        DeliveryConfirmations, FairnessMetric, FairnessClass
    Services: NegotiationValidator
    Exceptions: SelfTradeError, QuantityOutOfRangeError, OwnershipError, ...
    Events: TradeProposedEvent, TradeAcceptedEvent, TradeCompletedEvent, ...
    Repositories: TradeRepository (interface)
"""

# Entities (Aggregate Roots)
from .entities import Trade

# Value Objects
from .value_objects import (
    DeliveryConfirmations,
    FairnessClass,
    FairnessMetric,
    PartyRole,
    ShippingInfo,
    ShippingStatus,
    TradeLine,
    TradeStatus,
)

# Exceptions
from .exceptions import (
    InvalidShippingUpdateError,
    InvalidTradeStateError,
    MissingRejectionReasonError,
    NotTradePartyError,
    OwnershipError,
    QuantityOutOfRangeError,
    SelfTradeError,
    UnknownStatusError,
)

# Events
from .events import (
    DeliveryConfirmedEvent,
    ShippingUpdatedEvent,
    TradeAcceptedEvent,
    TradeCancelledEvent,
    TradeCompletedEvent,
    TradeProposedEvent,
    TradeRejectedEvent,
    TradeUpdatedEvent,
)

# Repository interfaces
from .repositories import TradeRepository

# Domain services
from .services import NegotiationValidator, ValidatedOffer

__all__ = [
    # Entities
    "Trade",
    # Value Objects
    "TradeStatus",
    "ShippingStatus",
    "PartyRole",
    "TradeLine",
    "ShippingInfo",
    "DeliveryConfirmations",
    "FairnessMetric",
    "FairnessClass",
    # Exceptions
    "InvalidShippingUpdateError",
    "InvalidTradeStateError",
    "MissingRejectionReasonError",
    "NotTradePartyError",
    "OwnershipError",
    "QuantityOutOfRangeError",
    "SelfTradeError",
    "UnknownStatusError",
    # Events
    "TradeProposedEvent",
    "TradeUpdatedEvent",
    "TradeAcceptedEvent",
    "TradeRejectedEvent",
    "TradeCancelledEvent",
    "ShippingUpdatedEvent",
    "DeliveryConfirmedEvent",
    "TradeCompletedEvent",
    # Repositories
    "TradeRepository",
    # Services
    "NegotiationValidator",
    "ValidatedOffer",
]
