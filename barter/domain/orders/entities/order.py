"""Order Aggregate Root - a monetary purchase waiting for the seller.

The seller either confirms the whole order, rejects it, or processes it
partially with reduced per-line quantities. Whatever decision is applied is
fingerprinted; resubmitting that same decision is a no-op so stock is never
decremented twice.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from barter.domain.inventory import InsufficientStockError
from barter.domain.shared import AggregateRoot, ValidationError

from ..events.order_events import (
    OrderConfirmedEvent,
    OrderPartiallyFulfilledEvent,
    OrderPlacedEvent,
    OrderRejectedEvent,
)
from ..exceptions.order_exceptions import (
    InvalidOrderDecisionError,
    NotOrderSellerError,
    OrderAlreadyProcessedError,
)
from ..value_objects import (
    LineDecision,
    OrderAction,
    OrderDecision,
    OrderHistoryEntry,
    OrderLineItem,
    OrderStatus,
)

NOTHING_CONFIRMED_REASON = "No items could be confirmed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(AggregateRoot):
    """Order Aggregate Root.

    Rules:
    - Created in PENDING_CONFIRMATION by the buyer, one order per seller
    - Only the seller decides; only one decision is ever applied
    - Confirm needs stock for every line in full
    - Reject needs a reason and moves no stock
    - Partial: ``confirmed_qty = confirmed ? min(quantity, ordered_qty, stock) : 0``

    Example:
        >>> order.process_partial(
        ...     by_user_id=seller_id,
        ...     decisions=[LineDecision(product_id=2, quantity=5, confirmed=True)],
        ...     stock={2: 2},
        ... )
        True
        >>> order.status
        <OrderStatus.PARTIALLY_FULFILLED: 'Partially Fulfilled'>
    """

    def __init__(
        self,
        buyer_id: int,
        seller_id: int,
        items: Sequence[OrderLineItem],
        status: OrderStatus | str = OrderStatus.PENDING_CONFIRMATION,
        total: Optional[Decimal] = None,
        rejection_reason: Optional[str] = None,
        applied_decision: Optional[str] = None,
        history: Optional[Sequence[OrderHistoryEntry]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        id: Optional[int] = None,
        version: int = 0,
    ) -> None:
        super().__init__(id, version)

        if not items:
            raise InvalidOrderDecisionError("An order needs at least one item", order_id=id)

        self.buyer_id = buyer_id
        self.seller_id = seller_id
        self.items: list[OrderLineItem] = list(items)
        self.status = OrderStatus.parse(status)
        self.total = total if total is not None else self._ordered_total()
        self.rejection_reason = rejection_reason
        self.applied_decision = applied_decision
        self.history: list[OrderHistoryEntry] = list(history or [])
        self.created_at = created_at or _utcnow()
        self.updated_at = updated_at or self.created_at

    @classmethod
    def place(
        cls,
        buyer_id: int,
        seller_id: int,
        items: Sequence[OrderLineItem],
    ) -> "Order":
        """Factory method for a new order.

        Raises:
            ValidationError: Buyer is the seller.
        """
        if buyer_id == seller_id:
            raise ValidationError("Cannot order your own products", buyer_id=buyer_id)

        order = cls(buyer_id=buyer_id, seller_id=seller_id, items=items)
        order._record(OrderStatus.PENDING_CONFIRMATION, "Order placed")
        return order

    def record_placed(self) -> None:
        """Emit OrderPlacedEvent once the order has an ID."""
        if self.id is None:
            raise InvalidOrderDecisionError("Order must be persisted before it is announced")

        self.add_domain_event(
            OrderPlacedEvent(
                order_id=self.id,
                buyer_id=self.buyer_id,
                seller_id=self.seller_id,
                total=self.total,
            )
        )

    def is_party(self, user_id: int) -> bool:
        return user_id in (self.buyer_id, self.seller_id)

    # ==================== Whole-order decisions ====================

    def confirm(self, by_user_id: int, stock: Mapping[int, int]) -> bool:
        """Confirm every line in full.

        Args:
            by_user_id: Caller; must be the seller.
            stock: Current stock per product ID.

        Returns:
            False when this exact decision was already applied.

        Raises:
            InsufficientStockError: A line lacks stock; reject or process
                partially instead.
            OrderAlreadyProcessedError: Another decision was applied.
        """
        decision = OrderDecision(OrderAction.CONFIRM)
        if not self._begin(by_user_id, decision):
            return False

        short = [
            item for item in self.items if stock.get(item.product_id, 0) < item.ordered_qty
        ]
        if short:
            raise InsufficientStockError(
                "Not enough stock to confirm the whole order",
                order_id=self.id,
                product_ids=[item.product_id for item in short],
            )

        self.items = [item.settle(item.ordered_qty) for item in self.items]
        self._finish(decision, OrderStatus.CONFIRMED, "Order confirmed")
        return True

    def reject(self, by_user_id: int, reason: Optional[str]) -> bool:
        """Reject the whole order. No stock moves."""
        reason = (reason or "").strip()
        if not reason:
            raise InvalidOrderDecisionError(
                "A reason is required to reject an order", order_id=self.id
            )

        decision = OrderDecision(OrderAction.REJECT, reason=reason)
        if not self._begin(by_user_id, decision):
            return False

        self.rejection_reason = reason
        self._finish(decision, OrderStatus.REJECTED, reason)
        return True

    # ==================== Partial fulfillment ====================

    def process_partial(
        self,
        by_user_id: int,
        decisions: Sequence[LineDecision],
        stock: Mapping[int, int],
    ) -> bool:
        """Apply per-line confirmed quantities.

        Lines the seller did not mention stay unconfirmed.

        Returns:
            False when this exact decision was already applied.

        Raises:
            InvalidOrderDecisionError: Unknown or duplicated product in the
                decision.
            OrderAlreadyProcessedError: Another decision was applied.
        """
        by_product = self._index_decisions(decisions)
        decision = OrderDecision(OrderAction.PARTIAL, lines=tuple(by_product.values()))
        if not self._begin(by_user_id, decision):
            return False

        settled = []
        for item in self.items:
            line = by_product.get(item.product_id)
            if line is None or not line.confirmed:
                settled.append(item.settle(0))
                continue
            quantity = min(line.quantity, item.ordered_qty, max(stock.get(item.product_id, 0), 0))
            settled.append(item.settle(quantity))
        self.items = settled

        if not any(item.confirmed for item in self.items):
            self.rejection_reason = NOTHING_CONFIRMED_REASON
            self._finish(decision, OrderStatus.REJECTED, NOTHING_CONFIRMED_REASON)
        elif all(item.fully_confirmed for item in self.items):
            self._finish(decision, OrderStatus.CONFIRMED, "Order confirmed")
        else:
            confirmed = sum(1 for item in self.items if item.confirmed)
            self._finish(
                decision,
                OrderStatus.PARTIALLY_FULFILLED,
                f"{confirmed} of {len(self.items)} items confirmed",
            )
        return True

    def _index_decisions(
        self, decisions: Sequence[LineDecision]
    ) -> dict[int, LineDecision]:
        known = {item.product_id for item in self.items}
        by_product: dict[int, LineDecision] = {}
        for line in decisions:
            if line.product_id not in known:
                raise InvalidOrderDecisionError(
                    "Product is not part of this order",
                    order_id=self.id,
                    product_id=line.product_id,
                )
            if line.product_id in by_product:
                raise InvalidOrderDecisionError(
                    "Product listed twice in the decision",
                    order_id=self.id,
                    product_id=line.product_id,
                )
            by_product[line.product_id] = line
        return by_product

    # ==================== Stock effects ====================

    @property
    def stock_movements(self) -> list[tuple[int, int]]:
        """``(product_id, quantity)`` to take out of the seller's stock."""
        return [
            (item.product_id, item.confirmed_qty)
            for item in self.items
            if item.confirmed_qty > 0
        ]

    def is_applied(self, decision: OrderDecision) -> bool:
        return self.applied_decision == decision.fingerprint

    # ==================== Internals ====================

    def _begin(self, by_user_id: int, decision: OrderDecision) -> bool:
        if by_user_id != self.seller_id:
            raise NotOrderSellerError(
                "Only the seller can process this order",
                order_id=self.id,
                user_id=by_user_id,
            )

        if self.is_applied(decision):
            return False

        if self.status.is_processed:
            raise OrderAlreadyProcessedError(
                "Order was already processed with a different decision",
                order_id=self.id,
                current_status=self.status.value,
            )
        return True

    def _finish(self, decision: OrderDecision, status: OrderStatus, note: str) -> None:
        self.status = status
        self.applied_decision = decision.fingerprint
        # A whole-order reject keeps the ordered total for reference
        if decision.action != OrderAction.REJECT:
            self.total = sum(
                (item.confirmed_total for item in self.items), Decimal("0")
            )
        self._record(status, note)

        if status == OrderStatus.CONFIRMED:
            event = OrderConfirmedEvent(
                order_id=self.id or 0,
                buyer_id=self.buyer_id,
                seller_id=self.seller_id,
                total=self.total,
            )
        elif status == OrderStatus.PARTIALLY_FULFILLED:
            event = OrderPartiallyFulfilledEvent(
                order_id=self.id or 0,
                buyer_id=self.buyer_id,
                seller_id=self.seller_id,
                total=self.total,
                confirmed_lines=sum(1 for item in self.items if item.confirmed),
                total_lines=len(self.items),
            )
        else:
            event = OrderRejectedEvent(
                order_id=self.id or 0,
                buyer_id=self.buyer_id,
                seller_id=self.seller_id,
                reason=self.rejection_reason or note,
            )
        self.add_domain_event(event)

    def _record(self, status: OrderStatus, note: Optional[str]) -> None:
        now = _utcnow()
        self.history.append(OrderHistoryEntry(status=status, note=note, changed_at=now))
        self.updated_at = now

    def _ordered_total(self) -> Decimal:
        return sum((item.ordered_total for item in self.items), Decimal("0"))

    def __repr__(self) -> str:
        return f"Order(id={self.id}, seller_id={self.seller_id}, status={self.status.value})"
