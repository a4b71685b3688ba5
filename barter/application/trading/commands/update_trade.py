"""UpdateTrade Command - revise quantities of a pending trade."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class UpdateTradeCommand(Command):
    """Command to change both quantities of a pending trade (proposer only)."""

    trade_id: int
    user_id: int
    qty_offered: int
    qty_requested: int
