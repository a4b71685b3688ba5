"""Read-side handlers for orders."""

from barter.application.orders.dtos import (
    OrderDTO,
    OrderHistoryEntryDTO,
    PendingOrderDTO,
)
from barter.application.orders.queries import (
    GetOrderHistoryQuery,
    GetPendingConfirmationQuery,
)
from barter.application.shared import QueryHandler, UnitOfWork
from barter.domain.shared import ForbiddenActionError

from .fulfillment_handlers import load_order


class GetPendingConfirmationHandler(
    QueryHandler[GetPendingConfirmationQuery, list[PendingOrderDTO]]
):
    """Seller view of pending orders.

    ``can_fully_confirm`` is False when any line asks for more than the
    current stock; those orders can only be rejected or processed partially.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetPendingConfirmationQuery) -> list[PendingOrderDTO]:
        async with self.uow:
            orders = await self.uow.orders.list_pending_for_seller(query.seller_id)
            product_ids = {item.product_id for order in orders for item in order.items}
            records = await self.uow.inventory.get_many(sorted(product_ids))

        stock = {
            product_id: record.stock
            for product_id, record in records.items()
            if record.owner_id == query.seller_id
        }

        return [
            PendingOrderDTO(
                order=OrderDTO.from_entity(order, stock=stock),
                can_fully_confirm=all(
                    stock.get(item.product_id, 0) >= item.ordered_qty for item in order.items
                ),
            )
            for order in orders
        ]


class GetOrderHistoryHandler(QueryHandler[GetOrderHistoryQuery, list[OrderHistoryEntryDTO]]):
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetOrderHistoryQuery) -> list[OrderHistoryEntryDTO]:
        async with self.uow:
            order = await load_order(self.uow, query.order_id)

        if not order.is_party(query.user_id):
            raise ForbiddenActionError(
                "Only the buyer or the seller can see this order",
                order_id=query.order_id,
                user_id=query.user_id,
            )
        return [OrderHistoryEntryDTO.from_entry(entry) for entry in order.history]
