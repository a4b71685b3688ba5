"""SetTradeAvailability Command - list or unlist a product for barter."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class SetTradeAvailabilityCommand(Command):
    """Command to flag (or unflag) one of the caller's products as tradeable."""

    product_id: int
    user_id: int
    available: bool
