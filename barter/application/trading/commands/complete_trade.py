"""CompleteTrade Command - manual completion trigger."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class CompleteTradeCommand(Command):
    """Command to finalize an accepted trade whose deliveries are both confirmed.

    The materialization retry worker issues the same operation without a
    caller (``user_id=None``).
    """

    trade_id: int
    user_id: int | None
