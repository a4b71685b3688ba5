"""Seller decisions on a pending order."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class ConfirmOrRejectOrderCommand(Command):
    """Whole-order decision.

    Example:
        >>> ConfirmOrRejectOrderCommand(order_id=5, seller_id=2, action="reject", reason="Sold out")
    """

    order_id: int
    seller_id: int
    action: str
    """``confirm`` or ``reject``."""

    reason: str | None = None
    """Mandatory for ``reject``."""


@dataclass(frozen=True)
class PartialLineRequest:
    product_id: int
    quantity: int
    confirmed: bool


@dataclass(frozen=True)
class ProcessPartialOrderCommand(Command):
    """Per-line decision: confirm reduced quantities, drop the rest.

    Resubmitting the same lines is a no-op.
    """

    order_id: int
    seller_id: int
    items: tuple[PartialLineRequest, ...]
