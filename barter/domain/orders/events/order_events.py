"""Domain Events for the Orders bounded context."""

from dataclasses import dataclass
from decimal import Decimal

from barter.domain.shared import DomainEvent


@dataclass(frozen=True)
class OrderPlacedEvent(DomainEvent):
    """Event: a buyer placed an order that waits for the seller."""

    order_id: int
    buyer_id: int
    seller_id: int
    total: Decimal


@dataclass(frozen=True)
class OrderConfirmedEvent(DomainEvent):
    """Event: every line of the order was confirmed in full."""

    order_id: int
    buyer_id: int
    seller_id: int
    total: Decimal


@dataclass(frozen=True)
class OrderPartiallyFulfilledEvent(DomainEvent):
    """Event: the seller confirmed reduced quantities.

    Subscribers can notify the buyer about the adjusted total.
    """

    order_id: int
    buyer_id: int
    seller_id: int
    total: Decimal
    confirmed_lines: int
    total_lines: int


@dataclass(frozen=True)
class OrderRejectedEvent(DomainEvent):
    """Event: the order was rejected; no stock moved."""

    order_id: int
    buyer_id: int
    seller_id: int
    reason: str
