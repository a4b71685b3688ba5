"""Integration tests for SQLAlchemyOrderRepository."""

from decimal import Decimal

import pytest

from barter.domain.orders import Order, OrderLineItem, OrderStatus
from barter.domain.shared import ConflictError


def new_order(seller_id: int = 2) -> Order:
    return Order.place(
        buyer_id=3,
        seller_id=seller_id,
        items=[
            OrderLineItem(product_id=1, name="A", unit_price=Decimal("10"), ordered_qty=2),
            OrderLineItem(product_id=2, name="B", unit_price=Decimal("20"), ordered_qty=5),
        ],
    )


async def store(uow, order: Order) -> Order:
    async with uow:
        await uow.orders.add(order)
        await uow.commit()
    return order


class TestOrderRepository:
    """Integration tests for orders, order_items and order_history."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, uow):
        order = await store(uow, new_order())

        async with uow:
            loaded = await uow.orders.get_by_id(order.id)

        assert loaded.status == OrderStatus.PENDING_CONFIRMATION
        assert loaded.total == Decimal("120")
        assert [item.name for item in loaded.items] == ["A", "B"]
        assert [item.ordered_qty for item in loaded.items] == [2, 5]
        assert [entry.status for entry in loaded.history] == [OrderStatus.PENDING_CONFIRMATION]
        assert loaded.version == 1

    @pytest.mark.asyncio
    async def test_save_writes_lines_and_appends_history(self, uow):
        order = await store(uow, new_order())

        async with uow:
            loaded = await uow.orders.get_by_id(order.id)
            loaded.confirm(by_user_id=2, stock={1: 10, 2: 10})
            await uow.orders.save(loaded, expected_status=OrderStatus.PENDING_CONFIRMATION)
            await uow.commit()

        async with uow:
            stored = await uow.orders.get_by_id(order.id)

        assert stored.status == OrderStatus.CONFIRMED
        assert [item.confirmed_qty for item in stored.items] == [2, 5]
        assert all(item.confirmed for item in stored.items)
        assert [entry.status for entry in stored.history] == [
            OrderStatus.PENDING_CONFIRMATION,
            OrderStatus.CONFIRMED,
        ]
        assert stored.applied_decision == loaded.applied_decision
        assert stored.version == 2

    @pytest.mark.asyncio
    async def test_second_decision_on_stale_copy_conflicts(self, uow_factory):
        """Test: The compare-and-set refuses a decision made on an old read."""
        order = await store(uow_factory(), new_order())

        first, second = uow_factory(), uow_factory()
        async with first:
            winner = await first.orders.get_by_id(order.id)
        async with second:
            loser = await second.orders.get_by_id(order.id)

        async with first:
            winner.reject(by_user_id=2, reason="Closed")
            await first.orders.save(winner, expected_status=OrderStatus.PENDING_CONFIRMATION)
            await first.commit()

        loser.confirm(by_user_id=2, stock={1: 10, 2: 10})
        with pytest.raises(ConflictError):
            async with second:
                await second.orders.save(
                    loser, expected_status=OrderStatus.PENDING_CONFIRMATION
                )

        async with first:
            stored = await first.orders.get_by_id(order.id)
        assert stored.status == OrderStatus.REJECTED
        assert len(stored.history) == 2

    @pytest.mark.asyncio
    async def test_list_pending_for_seller(self, uow):
        pending = await store(uow, new_order(seller_id=2))
        processed = await store(uow, new_order(seller_id=2))
        await store(uow, new_order(seller_id=5))

        async with uow:
            loaded = await uow.orders.get_by_id(processed.id)
            loaded.reject(by_user_id=2, reason="No")
            await uow.orders.save(loaded, expected_status=OrderStatus.PENDING_CONFIRMATION)
            await uow.commit()

        async with uow:
            orders = await uow.orders.list_pending_for_seller(2)

        assert [o.id for o in orders] == [pending.id]
