"""Commands that move a pending trade forward or end it."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class AcceptTradeCommand(Command):
    """Counterpart accepts the offer. Stock is re-checked first."""

    trade_id: int
    user_id: int


@dataclass(frozen=True)
class RejectTradeCommand(Command):
    """Counterpart declines the offer."""

    trade_id: int
    user_id: int
    reason: str | None
    """Mandatory; blank reasons are refused."""


@dataclass(frozen=True)
class CancelTradeCommand(Command):
    """Proposer withdraws the offer."""

    trade_id: int
    user_id: int
