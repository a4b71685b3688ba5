"""Enums for the Orders bounded context."""

from enum import Enum

from barter.domain.shared import ValidationError


class OrderStatus(str, Enum):
    """Monetary order status.

    State machine:
        PENDING_CONFIRMATION → CONFIRMED | PARTIALLY_FULFILLED | REJECTED

    Every status other than PENDING_CONFIRMATION is final.
    """

    PENDING_CONFIRMATION = "Pending Confirmation"
    CONFIRMED = "Confirmed"
    PARTIALLY_FULFILLED = "Partially Fulfilled"
    REJECTED = "Rejected"

    @classmethod
    def parse(cls, value: "str | OrderStatus") -> "OrderStatus":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("Unknown order status", status=value) from None

    @property
    def is_processed(self) -> bool:
        return self != OrderStatus.PENDING_CONFIRMATION


class OrderAction(str, Enum):
    """Kind of seller decision applied to an order."""

    CONFIRM = "confirm"
    REJECT = "reject"
    PARTIAL = "partial"
