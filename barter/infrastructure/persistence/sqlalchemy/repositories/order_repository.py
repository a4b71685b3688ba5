"""SQLAlchemy implementation of OrderRepository."""

from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from barter.domain.orders import Order, OrderStatus
from barter.domain.orders import OrderRepository as OrderRepositoryPort
from barter.domain.shared import ConflictError
from barter.infrastructure.persistence.sqlalchemy.mappers import OrderMapper
from barter.infrastructure.persistence.sqlalchemy.models import (
    OrderHistoryModel,
    OrderItemModel,
    OrderModel,
)


class SQLAlchemyOrderRepository(OrderRepositoryPort):
    """SQLAlchemy implementation of OrderRepository port.

    The ``orders`` row is the concurrency anchor: it is updated first with
    a compare-and-set, and line items and history are only written by the
    transaction that won it.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._mapper = OrderMapper()

    async def add(self, order: Order) -> None:
        """INSERT order with its items and history."""
        model = self._mapper.to_model(order)
        self._session.add(model)
        await self._session.flush()

        order.id = model.id
        order.version = model.version

    async def save(self, order: Order, expected_status: OrderStatus) -> None:
        """UPDATE order as a compare-and-set, then its items and new history.

        Raises:
            ConflictError: Another decision was written first.
        """
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == order.id)
            .where(OrderModel.version == order.version)
            .where(OrderModel.status == expected_status.value)
            .values(**self._mapper.to_values(order), version=OrderModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount != 1:
            raise ConflictError(
                "Order was modified concurrently, re-fetch and retry",
                order_id=order.id,
                expected_status=expected_status.value,
                expected_version=order.version,
            )

        for position, item in enumerate(order.items):
            await self._session.execute(
                update(OrderItemModel)
                .where(OrderItemModel.order_id == order.id)
                .where(OrderItemModel.position == position)
                .values(confirmed_qty=item.confirmed_qty, confirmed=item.confirmed)
                .execution_options(synchronize_session=False)
            )

        # History is append-only: insert what is not stored yet
        stored = await self._session.scalar(
            select(func.count(OrderHistoryModel.id)).where(
                OrderHistoryModel.order_id == order.id
            )
        )
        for entry in order.history[stored:]:
            row = self._mapper.history_to_model(entry)
            row.order_id = order.id
            self._session.add(row)
        await self._session.flush()

        order.version += 1

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return self._mapper.to_entity(model)

    async def list_pending_for_seller(self, seller_id: int) -> list[Order]:
        """Get the seller's PENDING_CONFIRMATION orders, oldest first."""
        stmt = (
            select(OrderModel)
            .where(OrderModel.seller_id == seller_id)
            .where(OrderModel.status == OrderStatus.PENDING_CONFIRMATION.value)
            .order_by(OrderModel.created_at.asc(), OrderModel.id.asc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)

        return [self._mapper.to_entity(model) for model in result.scalars().all()]
