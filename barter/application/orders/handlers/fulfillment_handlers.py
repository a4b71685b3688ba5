"""Order fulfillment handlers - placement and seller decisions.

A seller decision and its stock decrements commit together. The order row
is written as a compare-and-set on ``(order_id, PENDING_CONFIRMATION,
version)`` and every decrement is conditional on ``stock >= quantity``, so a
product shared by several pending orders is never oversold.
"""

import logging
from collections import OrderedDict
from typing import Callable, Mapping

from barter.application.orders.commands import (
    ConfirmOrRejectOrderCommand,
    PlaceOrderCommand,
    ProcessPartialOrderCommand,
)
from barter.application.orders.dtos import OrderDecisionResultDTO, OrderDTO
from barter.application.shared import CommandHandler, UnitOfWork
from barter.domain.inventory import InsufficientStockError
from barter.domain.orders import (
    InvalidOrderDecisionError,
    LineDecision,
    Order,
    OrderAction,
    OrderAlreadyProcessedError,
    OrderLineItem,
    OrderStatus,
)
from barter.domain.shared import (
    AggregateNotFound,
    ConflictError,
    DomainException,
    TransactionError,
    ValidationError,
)
from barter.infrastructure.messaging import EventBus

logger = logging.getLogger(__name__)

# Applies a decision to an order given current stock; False means "already applied"
Decision = Callable[[Order, Mapping[int, int]], bool]


async def load_order(uow: UnitOfWork, order_id: int) -> Order:
    order = await uow.orders.get_by_id(order_id)
    if order is None:
        raise AggregateNotFound("Order not found", order_id=order_id)
    return order


class PlaceOrderHandler(CommandHandler[PlaceOrderCommand, list[OrderDTO]]):
    """Handler for PlaceOrder command.

    Creates one PENDING_CONFIRMATION order per seller with unit price
    snapshots. Stock is not reserved; the seller's decision checks it.
    """

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def handle(self, command: PlaceOrderCommand) -> list[OrderDTO]:
        if not command.items:
            raise ValidationError("An order needs at least one item")

        quantities: OrderedDict[int, int] = OrderedDict()
        for item in command.items:
            if item.quantity < 1:
                raise ValidationError(
                    "Quantity must be at least 1", product_id=item.product_id
                )
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

        async with self.uow:
            records = await self.uow.inventory.get_many(list(quantities))

            by_seller: OrderedDict[int, list[OrderLineItem]] = OrderedDict()
            for product_id, quantity in quantities.items():
                record = records.get(product_id)
                if record is None:
                    raise AggregateNotFound("Product not found", product_id=product_id)
                by_seller.setdefault(record.owner_id, []).append(
                    OrderLineItem(
                        product_id=product_id,
                        name=record.name,
                        unit_price=record.unit_price,
                        ordered_qty=quantity,
                    )
                )

            orders = [
                Order.place(buyer_id=command.buyer_id, seller_id=seller_id, items=items)
                for seller_id, items in by_seller.items()
            ]
            for order in orders:
                await self.uow.orders.add(order)
                order.record_placed()

            await self.uow.commit()

        for order in orders:
            logger.info(
                "order.placed",
                extra={
                    "order_id": order.id,
                    "buyer_id": order.buyer_id,
                    "seller_id": order.seller_id,
                    "total": str(order.total),
                },
            )
            events = order.get_domain_events()
            order.clear_domain_events()
            await self.event_bus.publish_all(events)

        return [OrderDTO.from_entity(order) for order in orders]


class _OrderDecisionHandler:
    """Runs one seller decision: load, decide, persist, decrement, commit.

    If the compare-and-set loses a race the order is re-read and the same
    decision re-applied in memory: an identical decision that already won
    comes back as a no-op, a different one raises OrderAlreadyProcessedError.
    """

    def __init__(self, uow: UnitOfWork, event_bus: EventBus) -> None:
        self.uow = uow
        self.event_bus = event_bus

    async def _run(self, order_id: int, decide: Decision) -> OrderDecisionResultDTO:
        try:
            async with self.uow:
                order = await load_order(self.uow, order_id)
                stock = await self._stock_of(order)

                applied = decide(order, stock)
                if applied:
                    await self.uow.orders.save(
                        order, expected_status=OrderStatus.PENDING_CONFIRMATION
                    )
                    await self._take_stock(order)
                    await self.uow.commit()

        except OrderAlreadyProcessedError:
            raise

        except ConflictError:
            async with self.uow:
                order = await load_order(self.uow, order_id)
                stock = await self._stock_of(order)
            if decide(order, stock):
                raise
            applied = False

        if applied:
            logger.info(
                "order.processed",
                extra={
                    "order_id": order.id,
                    "status": order.status.value,
                    "total": str(order.total),
                },
            )
            events = order.get_domain_events()
            order.clear_domain_events()
            await self.event_bus.publish_all(events)
        else:
            logger.info("order.decision_repeated", extra={"order_id": order.id})

        return OrderDecisionResultDTO(order=OrderDTO.from_entity(order), applied=applied)

    async def _stock_of(self, order: Order) -> dict[int, int]:
        records = await self.uow.inventory.get_many([item.product_id for item in order.items])
        return {
            product_id: record.stock
            for product_id, record in records.items()
            if record.owner_id == order.seller_id
        }

    async def _take_stock(self, order: Order) -> None:
        for product_id, quantity in order.stock_movements:
            if not await self.uow.inventory.decrement_stock(product_id, quantity):
                raise InsufficientStockError(
                    "Stock changed while processing the order",
                    order_id=order.id,
                    product_id=product_id,
                    required=quantity,
                )


class ConfirmOrRejectOrderHandler(
    _OrderDecisionHandler,
    CommandHandler[ConfirmOrRejectOrderCommand, OrderDecisionResultDTO],
):
    """Handler for whole-order confirm / reject.

    Raises:
        InsufficientStockError: Confirm while a line lacks stock.
        InvalidOrderDecisionError: Unknown action, or reject without reason.
        NotOrderSellerError: Caller is not the seller.
        OrderAlreadyProcessedError: A different decision was applied before.
    """

    async def handle(self, command: ConfirmOrRejectOrderCommand) -> OrderDecisionResultDTO:
        action = (command.action or "").strip().lower()

        if action == OrderAction.CONFIRM.value:
            def decide(order: Order, stock: Mapping[int, int]) -> bool:
                return order.confirm(by_user_id=command.seller_id, stock=stock)
        elif action == OrderAction.REJECT.value:
            def decide(order: Order, stock: Mapping[int, int]) -> bool:
                return order.reject(by_user_id=command.seller_id, reason=command.reason)
        else:
            raise InvalidOrderDecisionError(
                "Action must be 'confirm' or 'reject'",
                order_id=command.order_id,
                action=command.action,
            )

        return await self._run(command.order_id, decide)


class ProcessPartialOrderHandler(
    _OrderDecisionHandler,
    CommandHandler[ProcessPartialOrderCommand, OrderDecisionResultDTO],
):
    """Handler for partial fulfillment.

    Any failure while moving stock rolls the whole decision back and is
    reported as TransactionError.
    """

    async def handle(self, command: ProcessPartialOrderCommand) -> OrderDecisionResultDTO:
        decisions = [
            LineDecision(
                product_id=line.product_id,
                quantity=max(line.quantity, 0),
                confirmed=line.confirmed,
            )
            for line in command.items
        ]

        def decide(order: Order, stock: Mapping[int, int]) -> bool:
            return order.process_partial(
                by_user_id=command.seller_id, decisions=decisions, stock=stock
            )

        try:
            return await self._run(command.order_id, decide)
        except InsufficientStockError as e:
            raise TransactionError(
                "Partial fulfillment was rolled back",
                order_id=command.order_id,
                cause=str(e),
            ) from e
        except DomainException:
            raise
        except Exception as e:
            logger.error(
                "order.partial_rolled_back",
                extra={"order_id": command.order_id, "error": str(e)},
                exc_info=True,
            )
            raise TransactionError(
                "Partial fulfillment was rolled back",
                order_id=command.order_id,
                cause=str(e),
            ) from e
