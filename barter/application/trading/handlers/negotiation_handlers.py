"""Negotiation handlers - propose and revise barter offers."""

import logging

from barter.application.shared import CommandHandler, UnitOfWork
from barter.application.trading.commands import ProposeTradeCommand, UpdateTradeCommand
from barter.application.trading.dtos import TradeDTO
from barter.domain.trading import NegotiationValidator, Trade, TradeStatus
from barter.infrastructure.messaging import EventBus

from ..common import load_trade, publish_events

logger = logging.getLogger(__name__)


class ProposeTradeHandler(CommandHandler[ProposeTradeCommand, TradeDTO]):
    """Handler for ProposeTrade command.

    Flow:
    1. Validate ownership, self-trade and quantities against current stock
    2. Create the trade in PENDING with price snapshots and fairness ratio
    3. Commit, then publish TradeProposedEvent

    Example:
        >>> handler = ProposeTradeHandler(uow=uow, event_bus=event_bus)
        >>> trade_dto = await handler.handle(ProposeTradeCommand(...))
        >>> trade_dto.status
        'pending'
    """

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def handle(self, command: ProposeTradeCommand) -> TradeDTO:
        """Propose a trade.

        Raises:
            SelfTradeError: Requested product belongs to the proposer.
            OwnershipError: Proposer does not own the offered product.
            QuantityOutOfRangeError: A quantity is outside ``[1, stock]``.
            AggregateNotFound: A product does not exist.
        """
        logger.info(
            "propose_trade.started",
            extra={
                "proposer_id": command.proposer_id,
                "offered_product_id": command.offered_product_id,
                "requested_product_id": command.requested_product_id,
            },
        )

        async with self.uow:
            validator = NegotiationValidator(self.uow.inventory)
            offer = await validator.validate_proposal(
                proposer_id=command.proposer_id,
                offered_product_id=command.offered_product_id,
                requested_product_id=command.requested_product_id,
                qty_offered=command.qty_offered,
                qty_requested=command.qty_requested,
                counterpart_id=command.counterpart_id,
            )

            trade = Trade.propose(
                proposer_id=command.proposer_id,
                counterpart_id=offer.counterpart_id,
                offered=offer.offered,
                requested=offer.requested,
                notes=command.notes,
            )
            await self.uow.trades.add(trade)
            trade.record_proposed()

            await self.uow.commit()

        logger.info(
            "trade.proposed",
            extra={
                "trade_id": trade.id,
                "value_ratio": str(trade.value_ratio),
                "fairness": trade.fairness.classification.value,
            },
        )

        await publish_events(self.event_bus, trade)
        return TradeDTO.from_entity(trade)


class UpdateTradeHandler(CommandHandler[UpdateTradeCommand, TradeDTO]):
    """Handler for UpdateTrade command.

    Re-validates against *current* stock, refreshes the price snapshots and
    recomputes the fairness ratio; the ratio of the proposal is never reused.
    """

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def handle(self, command: UpdateTradeCommand) -> TradeDTO:
        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)

            trade.ensure_updatable_by(command.user_id)
            validator = NegotiationValidator(self.uow.inventory)
            offer = await validator.validate_update(
                trade,
                qty_offered=command.qty_offered,
                qty_requested=command.qty_requested,
            )

            trade.update_quantities(
                by_user_id=command.user_id,
                offered=offer.offered,
                requested=offer.requested,
            )
            await self.uow.trades.save(trade, expected_status=TradeStatus.PENDING)
            await self.uow.commit()

        logger.info(
            "trade.updated",
            extra={
                "trade_id": trade.id,
                "qty_offered": command.qty_offered,
                "qty_requested": command.qty_requested,
                "value_ratio": str(trade.value_ratio),
            },
        )

        await publish_events(self.event_bus, trade)
        return TradeDTO.from_entity(trade)
