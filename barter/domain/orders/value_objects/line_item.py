"""Order line items and seller decisions."""

import hashlib
import json
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from barter.domain.shared import ValueObject, validate_value_object

from .enums import OrderAction, OrderStatus


@dataclass(frozen=True)
class OrderLineItem(ValueObject):
    """One product of an order with its ordered and confirmed quantity.

    ``confirmed = False`` always means ``confirmed_qty == 0``.
    """

    product_id: int
    name: str
    unit_price: Decimal
    ordered_qty: int
    confirmed_qty: int = 0
    confirmed: bool = False

    def __post_init__(self) -> None:
        validate_value_object(self.ordered_qty >= 1, "ordered_qty must be at least 1")
        validate_value_object(
            0 <= self.confirmed_qty <= self.ordered_qty,
            "confirmed_qty must be between 0 and ordered_qty",
        )
        validate_value_object(
            self.confirmed or self.confirmed_qty == 0,
            "unconfirmed lines cannot carry a confirmed quantity",
        )

    @property
    def ordered_total(self) -> Decimal:
        return self.unit_price * self.ordered_qty

    @property
    def confirmed_total(self) -> Decimal:
        return self.unit_price * self.confirmed_qty

    @property
    def fully_confirmed(self) -> bool:
        return self.confirmed and self.confirmed_qty == self.ordered_qty

    def settle(self, quantity: int) -> "OrderLineItem":
        """Confirm ``quantity`` units; zero leaves the line unconfirmed."""
        return replace(self, confirmed_qty=quantity, confirmed=quantity > 0)


@dataclass(frozen=True)
class LineDecision(ValueObject):
    """Seller's decision for one line of a partial fulfillment."""

    product_id: int
    quantity: int
    confirmed: bool

    def __post_init__(self) -> None:
        validate_value_object(self.quantity >= 0, "quantity must be non-negative")


@dataclass(frozen=True)
class OrderDecision(ValueObject):
    """A whole seller decision, fingerprinted for idempotent resubmission.

    Example:
        >>> a, b = OrderDecision(OrderAction.CONFIRM), OrderDecision(OrderAction.CONFIRM)
        >>> a.fingerprint == b.fingerprint
        True
    """

    action: OrderAction
    reason: str | None = None
    lines: tuple[LineDecision, ...] = ()

    @property
    def fingerprint(self) -> str:
        payload = {
            "action": self.action.value,
            "reason": self.reason,
            "lines": [
                [line.product_id, line.quantity, line.confirmed]
                for line in sorted(self.lines, key=lambda line: line.product_id)
            ],
        }
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class OrderHistoryEntry(ValueObject):
    """One status change of an order."""

    status: OrderStatus
    note: str | None
    changed_at: datetime
