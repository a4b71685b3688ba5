"""Delivery handlers - dual confirmation and trade completion.

ConfirmDeliveryHandler is the delivery confirmation tracker: it records one
party's flag with a single-column update in its own transaction, then
re-reads the trade and hands it to the InventoryMaterializer once both flags
are set. Two parties confirming at the same instant both get their flag
stored; whichever reaches the materializer second finds the trade COMPLETED.
"""

import logging

from barter.application.shared import CommandHandler, UnitOfWork
from barter.application.trading.commands import CompleteTradeCommand, ConfirmDeliveryCommand
from barter.application.trading.dtos import (
    DeliveryConfirmationResult,
    MaterializationResult,
    TradeDTO,
)
from barter.application.trading.services import InventoryMaterializer
from barter.domain.shared import ConflictError, TransactionError
from barter.infrastructure.messaging import EventBus

from ..common import load_trade, publish_events

logger = logging.getLogger(__name__)


class ConfirmDeliveryHandler(CommandHandler[ConfirmDeliveryCommand, DeliveryConfirmationResult]):
    """Handler for ConfirmDelivery command.

    Flow:
    1. Domain guard (party, ACCEPTED, shipping SHIPPED/DELIVERED)
    2. Atomic per-field update of the caller's flag, commit
    3. Re-read; if both flags are set, materialize

    A repeated confirmation is a no-op returning the current state. A
    TransactionError while materializing does not undo the committed flag:
    the result comes back with ``materialization_deferred`` set and the trade
    still ACCEPTED.

    Example:
        >>> result = await handler.handle(ConfirmDeliveryCommand(trade_id=42, user_id=1))
        >>> result.trade.proposer_confirmed
        True
    """

    def __init__(
        self,
        uow: UnitOfWork,
        event_bus: EventBus,
        materializer: InventoryMaterializer | None = None,
    ) -> None:
        self.uow = uow
        self.event_bus = event_bus
        self.materializer = materializer or InventoryMaterializer(uow, event_bus)

    async def handle(self, command: ConfirmDeliveryCommand) -> DeliveryConfirmationResult:
        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)
            role = trade.role_of(command.user_id)

            newly_confirmed = trade.confirm_delivery(by_user_id=command.user_id)
            if newly_confirmed:
                if not await self.uow.trades.mark_confirmed(trade.id, role):
                    raise ConflictError(
                        "Trade changed while confirming delivery, re-fetch it",
                        trade_id=trade.id,
                    )
                await self.uow.commit()

        if newly_confirmed:
            logger.info(
                "trade.delivery_confirmed",
                extra={"trade_id": trade.id, "role": role.value},
            )
            await publish_events(self.event_bus, trade)
        else:
            logger.info(
                "trade.delivery_confirmation_repeated",
                extra={"trade_id": trade.id, "role": role.value},
            )

        # Fresh read: the other party may have confirmed in the meantime
        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)

        materialization: MaterializationResult | None = None
        deferred = False
        if trade.ready_for_completion:
            try:
                materialization = await self.materializer.materialize(trade.id)
            except TransactionError as e:
                # The flag is committed; retry_stalled picks the trade up
                logger.warning(
                    "trade.materialization_deferred",
                    extra={"trade_id": trade.id, "error": e.message},
                )
                deferred = True
            async with self.uow:
                trade = await load_trade(self.uow, command.trade_id)

        return DeliveryConfirmationResult(
            trade=TradeDTO.from_entity(trade),
            newly_confirmed=newly_confirmed,
            materialization=materialization,
            materialization_deferred=deferred,
        )


class CompleteTradeHandler(CommandHandler[CompleteTradeCommand, DeliveryConfirmationResult]):
    """Handler for the manual completion trigger.

    Completing an already completed trade returns it unchanged with
    ``already_materialized=True``.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        event_bus: EventBus,
        materializer: InventoryMaterializer | None = None,
    ) -> None:
        self.uow = uow
        self.event_bus = event_bus
        self.materializer = materializer or InventoryMaterializer(uow, event_bus)

    async def handle(self, command: CompleteTradeCommand) -> DeliveryConfirmationResult:
        """Complete a trade.

        Raises:
            NotTradePartyError: Caller is not a party.
            InvalidTradeStateError: Not ACCEPTED with both deliveries confirmed.
            TransactionError: Stock could not be moved; trade stays ACCEPTED.
        """
        if command.user_id is not None:
            async with self.uow:
                trade = await load_trade(self.uow, command.trade_id)
            trade.role_of(command.user_id)

        materialization = await self.materializer.materialize(command.trade_id)

        async with self.uow:
            trade = await load_trade(self.uow, command.trade_id)

        return DeliveryConfirmationResult(
            trade=TradeDTO.from_entity(trade),
            newly_confirmed=False,
            materialization=materialization,
        )
