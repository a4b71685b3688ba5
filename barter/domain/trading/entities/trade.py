"""Trade Aggregate Root - the heart of the barter lifecycle.

A Trade moves through a small state machine:

    PENDING → ACCEPTED → COMPLETED
    PENDING → REJECTED | CANCELLED

Once accepted it carries a shipping sub-workflow and two independent delivery
confirmations. Stock and ownership are never touched here; the inventory
materializer does that in the same transaction that persists ``complete()``.
"""

from datetime import datetime, timezone
from decimal import Decimal

from barter.domain.shared import AggregateRoot

from ..events.trade_events import (
    DeliveryConfirmedEvent,
    ShippingUpdatedEvent,
    TradeAcceptedEvent,
    TradeCancelledEvent,
    TradeCompletedEvent,
    TradeProposedEvent,
    TradeRejectedEvent,
    TradeUpdatedEvent,
)
from ..exceptions.trading_exceptions import (
    InvalidTradeStateError,
    MissingRejectionReasonError,
    NotTradePartyError,
    SelfTradeError,
)
from ..value_objects import (
    DeliveryConfirmations,
    FairnessMetric,
    PartyRole,
    ShippingInfo,
    ShippingStatus,
    TradeLine,
    TradeStatus,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Trade(AggregateRoot):
    """Trade Aggregate Root.

    Rules:
    - Created in PENDING by the proposer
    - Only PENDING trades can be updated, accepted, rejected or cancelled
    - accept/reject only by the counterpart, cancel only by the proposer
    - Shipping updates only while ACCEPTED, by either party
    - Delivery confirmations only once shipping is SHIPPED or DELIVERED
    - COMPLETED requires both confirmations
    - REJECTED, CANCELLED and COMPLETED are immutable

    Example:
        >>> trade = Trade.propose(
        ...     proposer_id=1,
        ...     counterpart_id=2,
        ...     offered=TradeLine(product_id=10, quantity=2, unit_price=Decimal("50")),
        ...     requested=TradeLine(product_id=20, quantity=1, unit_price=Decimal("100")),
        ... )
        >>> trade.value_ratio
        Decimal('1.00')
        >>> trade.accept(by_user_id=2)
        >>> trade.update_shipping(2, ShippingStatus.PREPARING)
        >>> trade.update_shipping(2, ShippingStatus.SHIPPED, tracking_number="TN1", courier="DHL")
        >>> trade.confirm_delivery(by_user_id=1)
        >>> trade.confirm_delivery(by_user_id=2)
        >>> trade.ready_for_completion
        True
    """

    def __init__(
        self,
        proposer_id: int,
        counterpart_id: int,
        offered: TradeLine,
        requested: TradeLine,
        status: TradeStatus | str = TradeStatus.PENDING,
        shipping: ShippingInfo | None = None,
        confirmations: DeliveryConfirmations | None = None,
        created_at: datetime | None = None,
        accepted_at: datetime | None = None,
        completed_at: datetime | None = None,
        rejection_reason: str | None = None,
        notes: str | None = None,
        id: int | None = None,
        version: int = 0,
    ) -> None:
        """Initialize trade.

        Args:
            proposer_id: User who made the offer.
            counterpart_id: Owner of the requested product.
            offered: What the proposer gives.
            requested: What the proposer wants in return.
            status: Lifecycle status; unknown values are rejected.
            shipping: Shipping sub-state (empty for new trades).
            confirmations: Delivery acknowledgements of both parties.
            id: Trade ID (None for new trades).
            version: Stored version for compare-and-set.

        Raises:
            SelfTradeError: proposer and counterpart are the same user.
            UnknownStatusError: status is not part of the state machine.
        """
        super().__init__(id, version)

        if proposer_id == counterpart_id:
            raise SelfTradeError(
                "Cannot trade with yourself",
                proposer_id=proposer_id,
                trade_id=id,
            )

        self.proposer_id = proposer_id
        self.counterpart_id = counterpart_id
        self.offered = offered
        self.requested = requested
        self.fairness = FairnessMetric.compute(offered, requested)

        self.status = TradeStatus.parse(status)
        self.shipping = shipping or ShippingInfo()
        self.confirmations = confirmations or DeliveryConfirmations()

        self.created_at = created_at or _utcnow()
        self.accepted_at = accepted_at
        self.completed_at = completed_at

        self.rejection_reason = rejection_reason
        self.notes = notes

    @classmethod
    def propose(
        cls,
        proposer_id: int,
        counterpart_id: int,
        offered: TradeLine,
        requested: TradeLine,
        notes: str | None = None,
    ) -> "Trade":
        """Factory method for a new offer.

        Ownership and stock are checked by the NegotiationValidator before
        this is called; the aggregate only guards its own invariants.

        Returns:
            Trade in PENDING status.
        """
        return cls(
            proposer_id=proposer_id,
            counterpart_id=counterpart_id,
            offered=offered,
            requested=requested,
            notes=notes,
        )

    def record_proposed(self) -> None:
        """Emit TradeProposedEvent once the trade has an ID."""
        if self.id is None:
            raise InvalidTradeStateError("Trade must be persisted before it is announced")

        self.add_domain_event(
            TradeProposedEvent(
                trade_id=self.id,
                proposer_id=self.proposer_id,
                counterpart_id=self.counterpart_id,
                offered_product_id=self.offered.product_id,
                requested_product_id=self.requested.product_id,
                value_ratio=self.value_ratio,
            )
        )

    # ==================== Parties ====================

    def is_party(self, user_id: int) -> bool:
        return user_id in (self.proposer_id, self.counterpart_id)

    def role_of(self, user_id: int) -> PartyRole:
        """Which side of the trade ``user_id`` is on.

        Raises:
            NotTradePartyError: User is neither proposer nor counterpart.
        """
        if user_id == self.proposer_id:
            return PartyRole.PROPOSER
        if user_id == self.counterpart_id:
            return PartyRole.COUNTERPART
        raise NotTradePartyError(
            "User is not a party to this trade",
            trade_id=self.id,
            user_id=user_id,
        )

    def party_id(self, role: PartyRole) -> int:
        return self.proposer_id if role == PartyRole.PROPOSER else self.counterpart_id

    # ==================== Negotiation ====================

    def ensure_updatable_by(self, user_id: int) -> None:
        """Only the proposer may revise, and only while PENDING."""
        self._require_role(user_id, PartyRole.PROPOSER, "update")
        self._require_status(TradeStatus.PENDING, "update")

    def update_quantities(
        self,
        by_user_id: int,
        offered: TradeLine,
        requested: TradeLine,
    ) -> None:
        """Revise both lines of a pending offer and recompute fairness.

        Raises:
            NotTradePartyError: Caller is not the proposer.
            InvalidTradeStateError: Trade is not PENDING or products changed.
        """
        self.ensure_updatable_by(by_user_id)

        if (
            offered.product_id != self.offered.product_id
            or requested.product_id != self.requested.product_id
        ):
            raise InvalidTradeStateError(
                "Products of a trade cannot be changed, only quantities",
                trade_id=self.id,
            )

        self.offered = offered
        self.requested = requested
        self.fairness = FairnessMetric.compute(offered, requested)

        self.add_domain_event(
            TradeUpdatedEvent(
                trade_id=self.id or 0,
                proposer_id=self.proposer_id,
                counterpart_id=self.counterpart_id,
                offered_quantity=offered.quantity,
                requested_quantity=requested.quantity,
                value_ratio=self.value_ratio,
            )
        )

    @property
    def value_ratio(self) -> Decimal | None:
        return self.fairness.ratio

    # ==================== Lifecycle transitions ====================

    def accept(self, by_user_id: int) -> None:
        """Counterpart accepts the offer.

        Stock is re-validated by the caller just before this is invoked.
        """
        self._require_role(by_user_id, PartyRole.COUNTERPART, "accept")
        self._transition(TradeStatus.ACCEPTED, "accept")
        self.accepted_at = _utcnow()

        self.add_domain_event(
            TradeAcceptedEvent(
                trade_id=self.id or 0,
                proposer_id=self.proposer_id,
                counterpart_id=self.counterpart_id,
            )
        )

    def reject(self, by_user_id: int, reason: str | None) -> None:
        """Counterpart declines the offer.

        Raises:
            MissingRejectionReasonError: reason is empty or blank.
        """
        self._require_role(by_user_id, PartyRole.COUNTERPART, "reject")
        reason = (reason or "").strip()
        if not reason:
            raise MissingRejectionReasonError(
                "A reason is required to reject a trade", trade_id=self.id
            )

        self._transition(TradeStatus.REJECTED, "reject")
        self.rejection_reason = reason

        self.add_domain_event(
            TradeRejectedEvent(
                trade_id=self.id or 0,
                proposer_id=self.proposer_id,
                counterpart_id=self.counterpart_id,
                reason=reason,
            )
        )

    def cancel(self, by_user_id: int) -> None:
        """Proposer withdraws the offer."""
        self._require_role(by_user_id, PartyRole.PROPOSER, "cancel")
        self._transition(TradeStatus.CANCELLED, "cancel")

        self.add_domain_event(
            TradeCancelledEvent(
                trade_id=self.id or 0,
                proposer_id=self.proposer_id,
                counterpart_id=self.counterpart_id,
            )
        )

    # ==================== Shipping & delivery ====================

    def update_shipping(
        self,
        by_user_id: int,
        status: ShippingStatus | str,
        tracking_number: str | None = None,
        courier: str | None = None,
        notes: str | None = None,
    ) -> None:
        """Publish shipping metadata. Either party may post updates.

        Raises:
            NotTradePartyError: Caller is not a party.
            InvalidTradeStateError: Trade is not ACCEPTED.
            InvalidShippingUpdateError: Out-of-order status or missing
                tracking details for SHIPPED.
        """
        self.role_of(by_user_id)
        self._require_status(TradeStatus.ACCEPTED, "update shipping for")

        self.shipping = self.shipping.advance(
            status=ShippingStatus.parse(status),
            by_user_id=by_user_id,
            at=_utcnow(),
            tracking_number=tracking_number,
            courier=courier,
            notes=notes,
        )

        self.add_domain_event(
            ShippingUpdatedEvent(
                trade_id=self.id or 0,
                updated_by=by_user_id,
                shipping_status=self.shipping.status.value,
                tracking_number=self.shipping.tracking_number,
                courier=self.shipping.courier,
            )
        )

    def confirm_delivery(self, by_user_id: int) -> bool:
        """Record the caller's acknowledgement of receipt.

        Idempotent: a repeated confirmation by the same party (even after the
        trade completed) changes nothing and returns False.

        Returns:
            True if the caller's flag was newly set.

        Raises:
            NotTradePartyError: Caller is not a party.
            InvalidTradeStateError: Trade is not ACCEPTED, or shipping has
                not reached SHIPPED yet.
        """
        role = self.role_of(by_user_id)

        if self.confirmations.is_confirmed_by(role):
            return False

        self._require_status(TradeStatus.ACCEPTED, "confirm delivery for")
        if not self.shipping.status.accepts_delivery_confirmation:
            raise InvalidTradeStateError(
                "Delivery can only be confirmed once the goods are shipped",
                trade_id=self.id,
                shipping_status=self.shipping.status.value,
            )

        self.confirmations = self.confirmations.confirm(role)

        self.add_domain_event(
            DeliveryConfirmedEvent(
                trade_id=self.id or 0,
                confirmed_by=by_user_id,
                role=role.value,
                both_confirmed=self.confirmations.both,
            )
        )
        return True

    @property
    def ready_for_completion(self) -> bool:
        return (
            self.status == TradeStatus.ACCEPTED
            and self.shipping.status.accepts_delivery_confirmation
            and self.confirmations.both
        )

    def complete(self) -> None:
        """Finalize the trade (ACCEPTED → COMPLETED).

        Called by the inventory materializer inside the transaction that moves
        the stock. Shipping settles to DELIVERED.

        Raises:
            InvalidTradeStateError: Not ACCEPTED, not shipped, or not both
                parties confirmed.
        """
        self._require_status(TradeStatus.ACCEPTED, "complete")
        if not self.ready_for_completion:
            raise InvalidTradeStateError(
                "Both parties must confirm delivery before completion",
                trade_id=self.id,
                shipping_status=self.shipping.status.value,
                proposer_confirmed=self.confirmations.proposer_confirmed,
                counterpart_confirmed=self.confirmations.counterpart_confirmed,
            )

        now = _utcnow()
        self._transition(TradeStatus.COMPLETED, "complete")
        self.completed_at = now
        self.shipping = self.shipping.mark_delivered(now)

        self.add_domain_event(
            TradeCompletedEvent(
                trade_id=self.id or 0,
                proposer_id=self.proposer_id,
                counterpart_id=self.counterpart_id,
                offered_product_id=self.offered.product_id,
                offered_quantity=self.offered.quantity,
                requested_product_id=self.requested.product_id,
                requested_quantity=self.requested.quantity,
                completed_at=now,
            )
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    # ==================== Guards ====================

    def _require_role(self, user_id: int, role: PartyRole, action: str) -> None:
        if self.role_of(user_id) != role:
            raise NotTradePartyError(
                f"Only the {role.value} can {action} this trade",
                trade_id=self.id,
                user_id=user_id,
            )

    def _require_status(self, expected: TradeStatus, action: str) -> None:
        if self.status != expected:
            raise InvalidTradeStateError(
                f"Cannot {action} trade: invalid status",
                trade_id=self.id,
                current_status=self.status.value,
                expected_status=expected.value,
            )

    def _transition(self, target: TradeStatus, action: str) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidTradeStateError(
                f"Cannot {action} trade: invalid status",
                trade_id=self.id,
                current_status=self.status.value,
                target_status=target.value,
            )
        self.status = target

    def __repr__(self) -> str:
        return (
            f"Trade(id={self.id}, proposer_id={self.proposer_id}, "
            f"counterpart_id={self.counterpart_id}, status={self.status.value})"
        )
