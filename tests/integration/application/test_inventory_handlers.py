"""Integration tests for inventory listing handlers."""

import pytest

from barter.application.inventory.commands import SetTradeAvailabilityCommand
from barter.application.inventory.handlers import (
    GetProductsForTradeHandler,
    GetProductTradeHistoryHandler,
    GetUserProductsHandler,
    SetTradeAvailabilityHandler,
)
from barter.application.inventory.queries import (
    GetProductsForTradeQuery,
    GetProductTradeHistoryQuery,
    GetUserProductsQuery,
)
from barter.domain.inventory import InsufficientStockError, NotProductOwnerError
from barter.domain.shared import AggregateNotFound


class TestTradeAvailability:
    @pytest.mark.asyncio
    async def test_add_and_remove_for_trade(self, uow_factory, seed_product):
        product = await seed_product(1, available=False)
        handler = SetTradeAvailabilityHandler(uow_factory())

        listed = await handler.handle(
            SetTradeAvailabilityCommand(product_id=product.id, user_id=1, available=True)
        )
        assert listed.available_for_trade is True

        withdrawn = await handler.handle(
            SetTradeAvailabilityCommand(product_id=product.id, user_id=1, available=False)
        )
        assert withdrawn.available_for_trade is False

    @pytest.mark.asyncio
    async def test_only_owner_changes_availability(self, uow_factory, seed_product):
        product = await seed_product(1, available=False)

        with pytest.raises(NotProductOwnerError):
            await SetTradeAvailabilityHandler(uow_factory()).handle(
                SetTradeAvailabilityCommand(product_id=product.id, user_id=2, available=True)
            )

    @pytest.mark.asyncio
    async def test_empty_product_cannot_be_listed(self, uow_factory, seed_product):
        product = await seed_product(1, stock=0, available=False)

        with pytest.raises(InsufficientStockError):
            await SetTradeAvailabilityHandler(uow_factory()).handle(
                SetTradeAvailabilityCommand(product_id=product.id, user_id=1, available=True)
            )

    @pytest.mark.asyncio
    async def test_missing_product(self, uow_factory):
        with pytest.raises(AggregateNotFound):
            await SetTradeAvailabilityHandler(uow_factory()).handle(
                SetTradeAvailabilityCommand(product_id=404, user_id=1, available=True)
            )


class TestProductQueries:
    @pytest.mark.asyncio
    async def test_products_for_trade_hide_callers_own(self, uow_factory, seed_product):
        await seed_product(1, name="Mine")
        lens = await seed_product(2, name="Lens")
        await seed_product(2, name="Private", available=False)

        products = await GetProductsForTradeHandler(uow_factory()).handle(
            GetProductsForTradeQuery(user_id=1)
        )

        assert [p.id for p in products] == [lens.id]

    @pytest.mark.asyncio
    async def test_current_user_products(self, uow_factory, seed_product):
        listed = await seed_product(1, name="Listed")
        hidden = await seed_product(1, name="Hidden", available=False)
        await seed_product(2, name="Someone else's")
        handler = GetUserProductsHandler(uow_factory())

        available = await handler.handle(GetUserProductsQuery(user_id=1))
        everything = await handler.handle(GetUserProductsQuery(user_id=1, available_only=False))

        assert [p.id for p in available] == [listed.id]
        assert [p.id for p in everything] == [listed.id, hidden.id]

    @pytest.mark.asyncio
    async def test_history_of_untraded_product_is_empty(self, uow_factory, seed_product):
        product = await seed_product(1)

        history = await GetProductTradeHistoryHandler(uow_factory()).handle(
            GetProductTradeHistoryQuery(product_id=product.id)
        )

        assert history == []

    @pytest.mark.asyncio
    async def test_history_of_missing_product(self, uow_factory):
        with pytest.raises(AggregateNotFound):
            await GetProductTradeHistoryHandler(uow_factory()).handle(
                GetProductTradeHistoryQuery(product_id=404)
            )
