"""Integration tests for Unit of Work."""

from decimal import Decimal

import pytest

from barter.domain.inventory import InventoryRecord
from barter.domain.orders import Order, OrderLineItem
from barter.infrastructure.persistence.sqlalchemy.unit_of_work import (
    SQLAlchemyUnitOfWork,
)


def listing(owner_id: int = 1, stock: int = 5) -> InventoryRecord:
    return InventoryRecord.create_listing(
        owner_id=owner_id, name="Lamp", unit_price=Decimal("20"), stock=stock
    )


class TestUnitOfWork:
    """Integration tests for the Unit of Work pattern."""

    @pytest.mark.asyncio
    async def test_commit_transaction(self, session_factory):
        """Test successful transaction commit."""
        # Arrange
        uow = SQLAlchemyUnitOfWork(session_factory)
        record = listing()

        # Act
        async with uow:
            await uow.inventory.add(record)
            await uow.commit()

        # Assert
        async with uow:
            saved = await uow.inventory.get_by_id(record.id)
            assert saved is not None
            assert saved.name == "Lamp"

    @pytest.mark.asyncio
    async def test_uncommitted_work_is_discarded(self, session_factory):
        uow = SQLAlchemyUnitOfWork(session_factory)
        record = listing()

        async with uow:
            await uow.inventory.add(record)

        async with uow:
            assert await uow.inventory.get_by_id(record.id) is None

    @pytest.mark.asyncio
    async def test_rollback_on_exception(self, session_factory):
        """Test: An exception inside the block undoes every repository's writes."""
        # Arrange
        uow = SQLAlchemyUnitOfWork(session_factory)
        record = listing()

        # Act & Assert
        with pytest.raises(ValueError):
            async with uow:
                await uow.inventory.add(record)
                await uow.orders.add(
                    Order.place(
                        buyer_id=3,
                        seller_id=1,
                        items=[OrderLineItem(record.id, "Lamp", Decimal("20"), 1)],
                    )
                )
                raise ValueError("Test exception")

        # Verify: nothing was stored
        async with uow:
            assert await uow.inventory.get_by_id(record.id) is None
            assert await uow.orders.list_pending_for_seller(1) == []

    @pytest.mark.asyncio
    async def test_stock_and_order_in_single_transaction(self, session_factory, seed_product):
        """Test: A decrement and an order write commit together."""
        product = await seed_product(1, stock=5)
        uow = SQLAlchemyUnitOfWork(session_factory)

        async with uow:
            order = Order.place(
                buyer_id=3,
                seller_id=1,
                items=[OrderLineItem(product.id, "Product", Decimal("50"), 2)],
            )
            await uow.orders.add(order)
            assert await uow.inventory.decrement_stock(product.id, 2) is True
            await uow.commit()

        async with uow:
            assert (await uow.inventory.get_by_id(product.id)).stock == 3
            assert await uow.orders.get_by_id(order.id) is not None

    @pytest.mark.asyncio
    async def test_nested_use_is_refused(self, session_factory):
        uow = SQLAlchemyUnitOfWork(session_factory)

        async with uow:
            with pytest.raises(RuntimeError):
                async with uow:
                    pass

    @pytest.mark.asyncio
    async def test_repositories_need_open_session(self, session_factory):
        uow = SQLAlchemyUnitOfWork(session_factory)

        with pytest.raises(RuntimeError):
            uow.trades
