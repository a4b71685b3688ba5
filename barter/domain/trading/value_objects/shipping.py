"""Shipping and delivery-confirmation value objects."""

from dataclasses import dataclass, replace
from datetime import datetime

from barter.domain.shared import ValueObject

from ..exceptions.trading_exceptions import InvalidShippingUpdateError
from .enums import PartyRole, ShippingStatus


@dataclass(frozen=True)
class ShippingInfo(ValueObject):
    """Shipping metadata published by either party of an accepted trade."""

    status: ShippingStatus = ShippingStatus.NONE
    tracking_number: str | None = None
    courier: str | None = None
    notes: str | None = None
    updated_by: int | None = None
    updated_at: datetime | None = None

    def advance(
        self,
        status: ShippingStatus,
        by_user_id: int,
        at: datetime,
        tracking_number: str | None = None,
        courier: str | None = None,
        notes: str | None = None,
    ) -> "ShippingInfo":
        """Move to the next shipping status.

        Raises:
            InvalidShippingUpdateError: Out-of-order status, or SHIPPED without
                tracking number and courier.
        """
        if not self.status.can_transition_to(status):
            raise InvalidShippingUpdateError(
                "Shipping status cannot move in this direction",
                current_status=self.status.value,
                requested_status=status.value,
            )

        tracking_number = (tracking_number or "").strip() or self.tracking_number
        courier = (courier or "").strip() or self.courier

        if status == ShippingStatus.SHIPPED and not (tracking_number and courier):
            raise InvalidShippingUpdateError(
                "Tracking number and courier are required to mark a trade as shipped"
            )

        return ShippingInfo(
            status=status,
            tracking_number=tracking_number,
            courier=courier,
            notes=notes if notes is not None else self.notes,
            updated_by=by_user_id,
            updated_at=at,
        )

    def mark_delivered(self, at: datetime) -> "ShippingInfo":
        """Settle to DELIVERED once both parties acknowledged receipt."""
        if self.status == ShippingStatus.DELIVERED:
            return self
        return replace(self, status=ShippingStatus.DELIVERED, updated_at=at)


@dataclass(frozen=True)
class DeliveryConfirmations(ValueObject):
    """Independent receipt acknowledgements of both trade parties."""

    proposer_confirmed: bool = False
    counterpart_confirmed: bool = False

    def is_confirmed_by(self, role: PartyRole) -> bool:
        if role == PartyRole.PROPOSER:
            return self.proposer_confirmed
        return self.counterpart_confirmed

    def confirm(self, role: PartyRole) -> "DeliveryConfirmations":
        if role == PartyRole.PROPOSER:
            return replace(self, proposer_confirmed=True)
        return replace(self, counterpart_confirmed=True)

    @property
    def both(self) -> bool:
        return self.proposer_confirmed and self.counterpart_confirmed
