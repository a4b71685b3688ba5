"""Lifecycle handlers - accept, reject, cancel and shipping updates.

Each transition loads the trade, runs the domain guard and persists the
result as a compare-and-set on the status it was loaded with.
"""

import logging

from barter.application.shared import CommandHandler, UnitOfWork
from barter.application.trading.commands import (
    AcceptTradeCommand,
    CancelTradeCommand,
    RejectTradeCommand,
    UpdateShippingCommand,
)
from barter.application.trading.dtos import TradeDTO
from barter.domain.trading import NegotiationValidator, TradeStatus
from barter.infrastructure.messaging import EventBus

from ..common import load_trade, publish_events

logger = logging.getLogger(__name__)


class AcceptTradeHandler(CommandHandler[AcceptTradeCommand, TradeDTO]):
    """Handler for AcceptTrade command.

    Stock may have drifted since the proposal, so both quantities are
    re-checked before the transition. An offer that no longer fits stock
    can only be rejected (or revised by the proposer).
    """

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def handle(self, command: AcceptTradeCommand) -> TradeDTO:
        """Accept a pending trade.

        Raises:
            NotTradePartyError: Caller is not the counterpart.
            InvalidTradeStateError: Trade is not PENDING.
            QuantityOutOfRangeError: Stock dropped below a traded quantity.
            ConflictError: Another transition won the race.
        """
        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)

            trade.accept(by_user_id=command.user_id)
            await NegotiationValidator(self.uow.inventory).ensure_still_satisfiable(trade)

            await self.uow.trades.save(trade, expected_status=TradeStatus.PENDING)
            await self.uow.commit()

        logger.info(
            "trade.accepted",
            extra={"trade_id": trade.id, "counterpart_id": command.user_id},
        )

        await publish_events(self.event_bus, trade)
        return TradeDTO.from_entity(trade)


class RejectTradeHandler(CommandHandler[RejectTradeCommand, TradeDTO]):
    """Handler for RejectTrade command (counterpart only, reason required)."""

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def handle(self, command: RejectTradeCommand) -> TradeDTO:
        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)
            trade.reject(by_user_id=command.user_id, reason=command.reason)
            await self.uow.trades.save(trade, expected_status=TradeStatus.PENDING)
            await self.uow.commit()

        logger.info(
            "trade.rejected",
            extra={"trade_id": trade.id, "counterpart_id": command.user_id},
        )

        await publish_events(self.event_bus, trade)
        return TradeDTO.from_entity(trade)


class CancelTradeHandler(CommandHandler[CancelTradeCommand, TradeDTO]):
    """Handler for CancelTrade command (proposer only)."""

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def handle(self, command: CancelTradeCommand) -> TradeDTO:
        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)
            trade.cancel(by_user_id=command.user_id)
            await self.uow.trades.save(trade, expected_status=TradeStatus.PENDING)
            await self.uow.commit()

        logger.info(
            "trade.cancelled",
            extra={"trade_id": trade.id, "proposer_id": command.user_id},
        )

        await publish_events(self.event_bus, trade)
        return TradeDTO.from_entity(trade)


class UpdateShippingHandler(CommandHandler[UpdateShippingCommand, TradeDTO]):
    """Handler for UpdateShipping command.

    Example:
        >>> await handler.handle(UpdateShippingCommand(trade_id=42, user_id=2, status="preparing"))
        >>> await handler.handle(
        ...     UpdateShippingCommand(
        ...         trade_id=42, user_id=2, status="shipped",
        ...         tracking_number="RR123456789UA", courier="Nova Poshta",
        ...     )
        ... )
    """

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def handle(self, command: UpdateShippingCommand) -> TradeDTO:
        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)
            trade.update_shipping(
                by_user_id=command.user_id,
                status=command.status,
                tracking_number=command.tracking_number,
                courier=command.courier,
                notes=command.notes,
            )
            await self.uow.trades.save(trade, expected_status=TradeStatus.ACCEPTED)
            await self.uow.commit()

        logger.info(
            "trade.shipping_updated",
            extra={
                "trade_id": trade.id,
                "shipping_status": trade.shipping.status.value,
                "updated_by": command.user_id,
            },
        )

        await publish_events(self.event_bus, trade)
        return TradeDTO.from_entity(trade)
