"""ProposeTrade Command - put a new barter offer on the table."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class ProposeTradeCommand(Command):
    """Command to propose a trade.

    Example:
        >>> command = ProposeTradeCommand(
        ...     proposer_id=1,
        ...     offered_product_id=10,
        ...     requested_product_id=20,
        ...     qty_offered=2,
        ...     qty_requested=1,
        ... )
        >>> trade_dto = await handler.handle(command)
    """

    proposer_id: int
    """Caller making the offer."""

    offered_product_id: int
    """Product the proposer gives."""

    requested_product_id: int
    """Product the proposer wants."""

    qty_offered: int

    qty_requested: int

    counterpart_id: int | None = None
    """Owner the caller expects to hold the requested product (optional check)."""

    notes: str | None = None
