"""UpdateShipping Command - publish shipping metadata of an accepted trade."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class UpdateShippingCommand(Command):
    """Command to advance the shipping sub-state.

    Example:
        >>> command = UpdateShippingCommand(
        ...     trade_id=42,
        ...     user_id=2,
        ...     status="shipped",
        ...     tracking_number="RR123456789UA",
        ...     courier="Nova Poshta",
        ... )
    """

    trade_id: int
    user_id: int
    status: str
    tracking_number: str | None = None
    courier: str | None = None
    notes: str | None = None
