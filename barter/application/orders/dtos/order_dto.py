"""Order DTOs for API responses."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from barter.domain.orders import Order, OrderHistoryEntry


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: int
    name: str
    unit_price: Decimal
    ordered_qty: int
    confirmed_qty: int
    confirmed: bool
    current_stock: int | None = None


@dataclass(frozen=True)
class OrderDTO:
    """Order data transfer object.

    ``current_stock`` on the lines is only filled for seller views.
    """

    id: int
    buyer_id: int
    seller_id: int
    status: str
    total: Decimal
    rejection_reason: str | None
    items: list[OrderLineDTO]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls, order: Order, stock: Optional[Mapping[int, int]] = None
    ) -> "OrderDTO":
        return cls(
            id=order.id or 0,
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            status=order.status.value,
            total=order.total,
            rejection_reason=order.rejection_reason,
            items=[
                OrderLineDTO(
                    product_id=item.product_id,
                    name=item.name,
                    unit_price=item.unit_price,
                    ordered_qty=item.ordered_qty,
                    confirmed_qty=item.confirmed_qty,
                    confirmed=item.confirmed,
                    current_stock=stock.get(item.product_id, 0) if stock is not None else None,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


@dataclass(frozen=True)
class PendingOrderDTO:
    """Seller view of an order waiting for a decision.

    When ``can_fully_confirm`` is False only reject and partial processing
    are offered.
    """

    order: OrderDTO
    can_fully_confirm: bool


@dataclass(frozen=True)
class OrderDecisionResultDTO:
    """Order after a decision; ``applied`` is False for an identical resubmission."""

    order: OrderDTO
    applied: bool


@dataclass(frozen=True)
class OrderHistoryEntryDTO:
    status: str
    note: str | None
    changed_at: datetime

    @classmethod
    def from_entry(cls, entry: OrderHistoryEntry) -> "OrderHistoryEntryDTO":
        return cls(status=entry.status.value, note=entry.note, changed_at=entry.changed_at)
