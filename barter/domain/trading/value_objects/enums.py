"""Enums for the Trading bounded context."""

from enum import Enum

from ..exceptions.trading_exceptions import UnknownStatusError


class TradeStatus(str, Enum):
    """Trade lifecycle status.

    State machine:
        PENDING → ACCEPTED → COMPLETED
        PENDING → REJECTED
        PENDING → CANCELLED

    REJECTED, CANCELLED and COMPLETED are terminal.
    """

    PENDING = "pending"
    """Proposed by the proposer, waiting for the counterpart."""

    ACCEPTED = "accepted"
    """Counterpart agreed; shipping sub-workflow is open."""

    REJECTED = "rejected"
    """Counterpart declined (with a reason)."""

    CANCELLED = "cancelled"
    """Proposer withdrew the offer."""

    COMPLETED = "completed"
    """Both parties confirmed delivery and inventory was materialized."""

    @classmethod
    def parse(cls, value: "str | TradeStatus") -> "TradeStatus":
        """Parse a stored/received status, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownStatusError(
                "Unknown trade status", status=value
            ) from None

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_TRADE_STATUSES

    def can_transition_to(self, target: "TradeStatus") -> bool:
        return target in _TRADE_TRANSITIONS[self]


_TERMINAL_TRADE_STATUSES = frozenset(
    {TradeStatus.REJECTED, TradeStatus.CANCELLED, TradeStatus.COMPLETED}
)

_TRADE_TRANSITIONS: dict[TradeStatus, frozenset[TradeStatus]] = {
    TradeStatus.PENDING: frozenset(
        {TradeStatus.ACCEPTED, TradeStatus.REJECTED, TradeStatus.CANCELLED}
    ),
    TradeStatus.ACCEPTED: frozenset({TradeStatus.COMPLETED}),
    TradeStatus.REJECTED: frozenset(),
    TradeStatus.CANCELLED: frozenset(),
    TradeStatus.COMPLETED: frozenset(),
}


class ShippingStatus(str, Enum):
    """Shipping sub-status, attached once a trade is accepted.

    State machine:
        NONE → PREPARING → SHIPPED → DELIVERED
    """

    NONE = "none"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"

    @classmethod
    def parse(cls, value: "str | ShippingStatus | None") -> "ShippingStatus":
        if value is None or value == "":
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            raise UnknownStatusError(
                "Unknown shipping status", status=value
            ) from None

    @property
    def accepts_delivery_confirmation(self) -> bool:
        return self in (ShippingStatus.SHIPPED, ShippingStatus.DELIVERED)

    def can_transition_to(self, target: "ShippingStatus") -> bool:
        return target in _SHIPPING_TRANSITIONS[self]


_SHIPPING_TRANSITIONS: dict[ShippingStatus, frozenset[ShippingStatus]] = {
    ShippingStatus.NONE: frozenset({ShippingStatus.PREPARING}),
    ShippingStatus.PREPARING: frozenset({ShippingStatus.SHIPPED}),
    ShippingStatus.SHIPPED: frozenset({ShippingStatus.DELIVERED}),
    ShippingStatus.DELIVERED: frozenset(),
}


class PartyRole(str, Enum):
    """Which side of a trade a user is on."""

    PROPOSER = "proposer"
    COUNTERPART = "counterpart"


class FairnessClass(str, Enum):
    """Advisory classification of a fairness ratio."""

    FAIR = "Fair"
    REASONABLE = "Reasonable"
    UNBALANCED = "Unbalanced"
    UNDETERMINED = "Undetermined"
