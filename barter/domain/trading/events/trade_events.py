"""Domain Events for the Trading bounded context."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from barter.domain.shared import DomainEvent


@dataclass(frozen=True)
class TradeProposedEvent(DomainEvent):
    """Event: a proposer put a new offer on the table.

    Subscribers can:
    - Notify the counterpart
    - Refresh the counterpart's trade list
    """

    trade_id: int
    proposer_id: int
    counterpart_id: int
    offered_product_id: int
    requested_product_id: int
    value_ratio: Decimal | None


@dataclass(frozen=True)
class TradeUpdatedEvent(DomainEvent):
    """Event: the proposer revised quantities of a pending trade."""

    trade_id: int
    proposer_id: int
    counterpart_id: int
    offered_quantity: int
    requested_quantity: int
    value_ratio: Decimal | None


@dataclass(frozen=True)
class TradeAcceptedEvent(DomainEvent):
    """Event: the counterpart accepted; the shipping sub-workflow is open."""

    trade_id: int
    proposer_id: int
    counterpart_id: int


@dataclass(frozen=True)
class TradeRejectedEvent(DomainEvent):
    """Event: the counterpart declined the offer."""

    trade_id: int
    proposer_id: int
    counterpart_id: int
    reason: str


@dataclass(frozen=True)
class TradeCancelledEvent(DomainEvent):
    """Event: the proposer withdrew the offer."""

    trade_id: int
    proposer_id: int
    counterpart_id: int


@dataclass(frozen=True)
class ShippingUpdatedEvent(DomainEvent):
    """Event: one party published shipping metadata."""

    trade_id: int
    updated_by: int
    shipping_status: str
    tracking_number: str | None
    courier: str | None


@dataclass(frozen=True)
class DeliveryConfirmedEvent(DomainEvent):
    """Event: one party acknowledged receipt of the goods.

    When both parties have confirmed the trade is ready to be materialized.
    """

    trade_id: int
    confirmed_by: int
    role: str
    both_confirmed: bool


@dataclass(frozen=True)
class TradeCompletedEvent(DomainEvent):
    """Event: the trade was finalized and its inventory materialized.

    This is the critical event - stock has moved between the parties.
    """

    trade_id: int
    proposer_id: int
    counterpart_id: int
    offered_product_id: int
    offered_quantity: int
    requested_product_id: int
    requested_quantity: int
    completed_at: datetime
