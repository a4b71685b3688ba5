"""ConfirmDelivery Command - one party acknowledges receipt."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class ConfirmDeliveryCommand(Command):
    """Command to set the caller's delivery flag.

    Idempotent per caller. When both flags end up set the trade is
    materialized in the same call.
    """

    trade_id: int
    user_id: int
