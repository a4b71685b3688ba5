"""InventoryMaterializer - turns a finished trade into stock movements.

One transaction does all of it:

1. Compare-and-set the trade ACCEPTED → COMPLETED (shipping → DELIVERED)
2. Conditionally decrement both traded products (``stock >= quantity``)
3. Create or top up one provenance-tagged record per recipient

The ACCEPTED → COMPLETED compare-and-set is the "already materialized"
guard: of two concurrent calls only one can win it, the other sees
COMPLETED and backs off without touching stock.
"""

import logging

from barter.application.shared import UnitOfWork
from barter.application.trading.dtos import MaterializationResult
from barter.domain.inventory import (
    InsufficientStockError,
    InventoryRecord,
    Provenance,
)
from barter.domain.shared import (
    AggregateNotFound,
    ConflictError,
    DomainException,
    ForbiddenActionError,
    InvalidStateTransition,
    TransactionError,
)
from barter.domain.trading import OwnershipError, Trade, TradeLine, TradeStatus
from barter.infrastructure.messaging import EventBus

from ..common import load_trade, publish_events

logger = logging.getLogger(__name__)


class InventoryMaterializer:
    """Application service finalizing trades.

    Example:
        >>> materializer = InventoryMaterializer(uow=uow, event_bus=event_bus)
        >>> result = await materializer.materialize(trade_id=42)
        >>> result.already_materialized
        False
        >>> (await materializer.materialize(trade_id=42)).already_materialized
        True
    """

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        """Initialize materializer.

        Args:
            uow: Unit of Work owning the materialization transaction.
            event_bus: Event bus for TradeCompletedEvent.
        """
        self.uow = uow
        self.event_bus = event_bus

    async def materialize(self, trade_id: int) -> MaterializationResult:
        """Complete the trade and move its inventory.

        Returns:
            MaterializationResult; ``already_materialized`` when another
            transaction completed the trade first.

        Raises:
            AggregateNotFound: No such trade.
            InvalidTradeStateError: Trade is not ACCEPTED with both
                deliveries confirmed.
            TransactionError: A stock step failed; nothing was committed and
                the trade stays ACCEPTED for retry.
        """
        logger.info("materialization.started", extra={"trade_id": trade_id})

        try:
            async with self.uow:
                trade = await load_trade(self.uow, trade_id)
                if trade.status == TradeStatus.COMPLETED:
                    return self._already_materialized(trade)

                trade.complete()
                await self.uow.trades.save(trade, expected_status=TradeStatus.ACCEPTED)

                proposer_record_id, counterpart_record_id = await self._move_inventory(trade)

                await self.uow.commit()

        except ConflictError:
            return await self._resolve_conflict(trade_id)

        except (AggregateNotFound, InvalidStateTransition, ForbiddenActionError):
            raise

        except Exception as e:
            logger.error(
                "materialization.rolled_back",
                extra={"trade_id": trade_id, "error": str(e)},
                exc_info=not isinstance(e, DomainException),
            )
            raise TransactionError(
                "Trade materialization failed and was rolled back",
                trade_id=trade_id,
                cause=str(e),
            ) from e

        logger.info(
            "trade.materialized",
            extra={
                "trade_id": trade.id,
                "proposer_record_id": proposer_record_id,
                "counterpart_record_id": counterpart_record_id,
            },
        )

        await publish_events(self.event_bus, trade)

        return MaterializationResult(
            trade_id=trade_id,
            already_materialized=False,
            completed_at=trade.completed_at,
            proposer_record_id=proposer_record_id,
            counterpart_record_id=counterpart_record_id,
        )

    async def retry_stalled(self, limit: int) -> list[MaterializationResult]:
        """Retry trades left ACCEPTED with both deliveries confirmed.

        Used by the background worker after a TransactionError. Failures are
        logged per trade; the trade stays eligible for the next run.
        """
        async with self.uow:
            stalled = await self.uow.trades.list_awaiting_materialization(limit)

        results: list[MaterializationResult] = []
        for trade in stalled:
            try:
                results.append(await self.materialize(trade.id))
            except DomainException as e:
                logger.warning(
                    "materialization.retry_failed",
                    extra={"trade_id": trade.id, "error": str(e)},
                )

        logger.info(
            "materialization.retry_finished",
            extra={"candidates": len(stalled), "materialized": len(results)},
        )
        return results

    # ==================== Steps ====================

    async def _move_inventory(self, trade: Trade) -> tuple[int, int]:
        """Decrement both sources and credit both recipients.

        Returns:
            ``(proposer_record_id, counterpart_record_id)`` of the records
            that received the goods.
        """
        sources = await self.uow.inventory.get_many(
            [trade.offered.product_id, trade.requested.product_id]
        )
        offered_source = self._source_of(sources, trade.offered, trade.proposer_id, trade)
        requested_source = self._source_of(sources, trade.requested, trade.counterpart_id, trade)

        for line in (trade.offered, trade.requested):
            if not await self.uow.inventory.decrement_stock(line.product_id, line.quantity):
                raise InsufficientStockError(
                    "Not enough stock left to complete the trade",
                    trade_id=trade.id,
                    product_id=line.product_id,
                    required=line.quantity,
                )

        provenance = Provenance(trade_id=trade.id, acquired_date=trade.completed_at)

        counterpart_record_id = await self._credit(
            recipient_id=trade.counterpart_id,
            source=offered_source,
            quantity=trade.offered.quantity,
            provenance=provenance,
        )
        proposer_record_id = await self._credit(
            recipient_id=trade.proposer_id,
            source=requested_source,
            quantity=trade.requested.quantity,
            provenance=provenance,
        )
        return proposer_record_id, counterpart_record_id

    @staticmethod
    def _source_of(
        sources: dict[int, InventoryRecord],
        line: TradeLine,
        giver_id: int,
        trade: Trade,
    ) -> InventoryRecord:
        source = sources.get(line.product_id)
        if source is None:
            raise InsufficientStockError(
                "Traded product no longer exists",
                trade_id=trade.id,
                product_id=line.product_id,
            )
        if source.owner_id != giver_id:
            raise OwnershipError(
                "Traded product changed owner before completion",
                trade_id=trade.id,
                product_id=line.product_id,
            )
        return source

    async def _credit(
        self,
        recipient_id: int,
        source: InventoryRecord,
        quantity: int,
        provenance: Provenance,
    ) -> int:
        existing = await self.uow.inventory.find_derived(recipient_id, source.id)
        if existing is not None:
            await self.uow.inventory.increment_stock(existing.id, quantity, origin=provenance)
            return existing.id

        record = InventoryRecord.acquire_from_trade(
            source=source,
            owner_id=recipient_id,
            quantity=quantity,
            provenance=provenance,
        )
        await self.uow.inventory.add(record)
        return record.id

    async def _resolve_conflict(self, trade_id: int) -> MaterializationResult:
        async with self.uow:
            current = await load_trade(self.uow, trade_id)

        if current.status == TradeStatus.COMPLETED:
            return self._already_materialized(current)

        logger.warning(
            "materialization.conflict",
            extra={"trade_id": trade_id, "status": current.status.value},
        )
        raise ConflictError(
            "Trade was modified concurrently, re-fetch and retry",
            trade_id=trade_id,
            current_status=current.status.value,
        )

    @staticmethod
    def _already_materialized(trade: Trade) -> MaterializationResult:
        logger.info("materialization.already_done", extra={"trade_id": trade.id})
        return MaterializationResult(
            trade_id=trade.id,
            already_materialized=True,
            completed_at=trade.completed_at,
        )
