"""Trade DTOs - data transfer objects for API responses."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from barter.domain.trading import PartyRole, Trade


@dataclass(frozen=True)
class TradeDTO:
    """Trade data transfer object.

    Used for API responses and between layers. No business logic.
    """

    id: int
    proposer_id: int
    counterpart_id: int
    status: str
    offered_product_id: int
    offered_quantity: int
    offered_unit_price: Decimal
    offered_value: Decimal
    requested_product_id: int
    requested_quantity: int
    requested_unit_price: Decimal
    requested_value: Decimal
    value_ratio: Decimal | None
    fairness: str
    shipping_status: str
    tracking_number: str | None
    courier: str | None
    shipping_notes: str | None
    shipping_updated_by: int | None
    shipping_updated_at: datetime | None
    proposer_confirmed: bool
    counterpart_confirmed: bool
    created_at: datetime
    accepted_at: datetime | None
    completed_at: datetime | None
    rejection_reason: str | None
    notes: str | None
    version: int

    @classmethod
    def from_entity(cls, trade: Trade) -> "TradeDTO":
        return cls(
            id=trade.id or 0,
            proposer_id=trade.proposer_id,
            counterpart_id=trade.counterpart_id,
            status=trade.status.value,
            offered_product_id=trade.offered.product_id,
            offered_quantity=trade.offered.quantity,
            offered_unit_price=trade.offered.unit_price,
            offered_value=trade.fairness.offered_value,
            requested_product_id=trade.requested.product_id,
            requested_quantity=trade.requested.quantity,
            requested_unit_price=trade.requested.unit_price,
            requested_value=trade.fairness.requested_value,
            value_ratio=trade.value_ratio,
            fairness=trade.fairness.classification.value,
            shipping_status=trade.shipping.status.value,
            tracking_number=trade.shipping.tracking_number,
            courier=trade.shipping.courier,
            shipping_notes=trade.shipping.notes,
            shipping_updated_by=trade.shipping.updated_by,
            shipping_updated_at=trade.shipping.updated_at,
            proposer_confirmed=trade.confirmations.proposer_confirmed,
            counterpart_confirmed=trade.confirmations.counterpart_confirmed,
            created_at=trade.created_at,
            accepted_at=trade.accepted_at,
            completed_at=trade.completed_at,
            rejection_reason=trade.rejection_reason,
            notes=trade.notes,
            version=trade.version,
        )


@dataclass(frozen=True)
class PerspectiveTradeDTO:
    """A trade seen from one party's side: what they gave and what they got."""

    trade: TradeDTO
    role: str
    with_user_id: int
    given_product_id: int
    given_quantity: int
    received_product_id: int
    received_quantity: int

    @classmethod
    def for_user(cls, trade: Trade, user_id: int) -> "PerspectiveTradeDTO":
        role = trade.role_of(user_id)
        if role == PartyRole.PROPOSER:
            given, received = trade.offered, trade.requested
        else:
            given, received = trade.requested, trade.offered

        return cls(
            trade=TradeDTO.from_entity(trade),
            role=role.value,
            with_user_id=trade.party_id(
                PartyRole.COUNTERPART if role == PartyRole.PROPOSER else PartyRole.PROPOSER
            ),
            given_product_id=given.product_id,
            given_quantity=given.quantity,
            received_product_id=received.product_id,
            received_quantity=received.quantity,
        )


@dataclass(frozen=True)
class MaterializationResult:
    """Outcome of turning a completed trade into inventory changes.

    ``already_materialized`` is True when another transaction completed the
    trade first; nothing was changed by this call.
    """

    trade_id: int
    already_materialized: bool
    completed_at: datetime | None
    proposer_record_id: int | None = None
    counterpart_record_id: int | None = None


@dataclass(frozen=True)
class DeliveryConfirmationResult:
    """Trade state after a delivery confirmation, plus what it triggered.

    ``materialization_deferred`` means both flags are stored but moving the
    stock rolled back; the retry sweep completes the trade later.
    """

    trade: TradeDTO
    newly_confirmed: bool
    materialization: MaterializationResult | None = None
    materialization_deferred: bool = False
