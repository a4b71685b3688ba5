"""Integration tests for order placement and seller fulfillment."""

import asyncio
from decimal import Decimal

import pytest

from barter.application.orders.commands import (
    ConfirmOrRejectOrderCommand,
    OrderItemRequest,
    PartialLineRequest,
    PlaceOrderCommand,
    ProcessPartialOrderCommand,
)
from barter.application.orders.handlers import (
    ConfirmOrRejectOrderHandler,
    GetOrderHistoryHandler,
    GetPendingConfirmationHandler,
    PlaceOrderHandler,
    ProcessPartialOrderHandler,
)
from barter.application.orders.queries import (
    GetOrderHistoryQuery,
    GetPendingConfirmationQuery,
)
from barter.domain.inventory import InsufficientStockError
from barter.domain.orders import (
    InvalidOrderDecisionError,
    NotOrderSellerError,
    OrderAlreadyProcessedError,
    OrderStatus,
)
from barter.domain.shared import AggregateNotFound, ForbiddenActionError, ValidationError

BUYER = 3
SELLER = 2


@pytest.fixture
async def catalog(seed_product):
    """Seller 2 sells A (stock 10, 10), B (stock 2, 20) and C (stock 10, 30)."""
    a = await seed_product(SELLER, stock=10, unit_price="10", name="A")
    b = await seed_product(SELLER, stock=2, unit_price="20", name="B")
    c = await seed_product(SELLER, stock=10, unit_price="30", name="C")
    return a, b, c


async def place(uow_factory, event_bus, *lines):
    return await PlaceOrderHandler(uow_factory(), event_bus).handle(
        PlaceOrderCommand(
            buyer_id=BUYER,
            items=tuple(OrderItemRequest(product_id=p, quantity=q) for p, q in lines),
        )
    )


def decide(order_id, action, reason=None, seller_id=SELLER):
    return ConfirmOrRejectOrderCommand(
        order_id=order_id, seller_id=seller_id, action=action, reason=reason
    )


def partial(order_id, *lines, seller_id=SELLER):
    return ProcessPartialOrderCommand(
        order_id=order_id,
        seller_id=seller_id,
        items=tuple(
            PartialLineRequest(product_id=p, quantity=q, confirmed=c) for p, q, c in lines
        ),
    )


class TestPlaceOrder:
    @pytest.mark.asyncio
    async def test_one_order_per_seller(self, uow_factory, event_bus, catalog, seed_product):
        a, _, _ = catalog
        other = await seed_product(5, stock=3, unit_price="7", name="Other")

        orders = await place(uow_factory, event_bus, (a.id, 2), (other.id, 1), (a.id, 1))

        assert [o.seller_id for o in orders] == [SELLER, 5]
        assert [(i.product_id, i.ordered_qty) for i in orders[0].items] == [(a.id, 3)]
        assert orders[0].total == Decimal("30")
        assert all(o.status == OrderStatus.PENDING_CONFIRMATION.value for o in orders)

    @pytest.mark.asyncio
    async def test_stock_is_not_reserved(self, uow_factory, event_bus, catalog, stock_of):
        a, _, _ = catalog

        await place(uow_factory, event_bus, (a.id, 4))

        assert await stock_of(a.id) == 10

    @pytest.mark.asyncio
    async def test_invalid_orders(self, uow_factory, event_bus, catalog):
        a, _, _ = catalog

        with pytest.raises(ValidationError):
            await place(uow_factory, event_bus)
        with pytest.raises(ValidationError):
            await place(uow_factory, event_bus, (a.id, 0))
        with pytest.raises(AggregateNotFound):
            await place(uow_factory, event_bus, (404, 1))


class TestWholeOrderDecision:
    @pytest.mark.asyncio
    async def test_confirm_takes_stock(self, uow_factory, event_bus, catalog, stock_of):
        a, _, c = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 2), (c.id, 1))

        result = await ConfirmOrRejectOrderHandler(uow_factory(), event_bus).handle(
            decide(order.id, "confirm")
        )

        assert result.applied is True
        assert result.order.status == OrderStatus.CONFIRMED.value
        assert await stock_of(a.id) == 8
        assert await stock_of(c.id) == 9

    @pytest.mark.asyncio
    async def test_confirm_with_short_line_fails(self, uow_factory, event_bus, catalog, stock_of):
        a, b, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 2), (b.id, 5))

        with pytest.raises(InsufficientStockError):
            await ConfirmOrRejectOrderHandler(uow_factory(), event_bus).handle(
                decide(order.id, "confirm")
            )

        assert await stock_of(a.id) == 10

    @pytest.mark.asyncio
    async def test_reject(self, uow_factory, event_bus, catalog, stock_of):
        a, _, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 2))
        handler = ConfirmOrRejectOrderHandler(uow_factory(), event_bus)

        with pytest.raises(InvalidOrderDecisionError):
            await handler.handle(decide(order.id, "reject"))

        result = await handler.handle(decide(order.id, "reject", reason="Closed for holidays"))

        assert result.order.status == OrderStatus.REJECTED.value
        assert result.order.rejection_reason == "Closed for holidays"
        assert await stock_of(a.id) == 10

    @pytest.mark.asyncio
    async def test_unknown_action(self, uow_factory, event_bus, catalog):
        a, _, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 1))

        with pytest.raises(InvalidOrderDecisionError):
            await ConfirmOrRejectOrderHandler(uow_factory(), event_bus).handle(
                decide(order.id, "ship")
            )

    @pytest.mark.asyncio
    async def test_only_seller_decides(self, uow_factory, event_bus, catalog):
        a, _, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 1))

        with pytest.raises(NotOrderSellerError):
            await ConfirmOrRejectOrderHandler(uow_factory(), event_bus).handle(
                decide(order.id, "confirm", seller_id=BUYER)
            )

    @pytest.mark.asyncio
    async def test_repeat_is_noop_and_switch_fails(
        self, uow_factory, event_bus, catalog, stock_of
    ):
        a, _, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 2))
        handler = ConfirmOrRejectOrderHandler(uow_factory(), event_bus)
        await handler.handle(decide(order.id, "confirm"))

        again = await handler.handle(decide(order.id, "confirm"))
        assert again.applied is False
        assert await stock_of(a.id) == 8

        with pytest.raises(OrderAlreadyProcessedError):
            await handler.handle(decide(order.id, "reject", reason="Changed my mind"))


class TestPartialFulfillment:
    @pytest.mark.asyncio
    async def test_partial_caps_short_line(self, uow_factory, event_bus, catalog, stock_of):
        """Test: A 2, B 5 (only 2 in stock), C 1 - B is cut down to 2."""
        a, b, c = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 2), (b.id, 5), (c.id, 1))

        result = await ProcessPartialOrderHandler(uow_factory(), event_bus).handle(
            partial(order.id, (a.id, 2, True), (b.id, 5, True), (c.id, 1, True))
        )

        assert result.applied is True
        assert result.order.status == OrderStatus.PARTIALLY_FULFILLED.value
        assert [item.confirmed_qty for item in result.order.items] == [2, 2, 1]
        assert result.order.total == Decimal("90")
        assert (await stock_of(a.id), await stock_of(b.id), await stock_of(c.id)) == (8, 0, 9)

    @pytest.mark.asyncio
    async def test_identical_resubmission_takes_stock_once(
        self, uow_factory, event_bus, catalog, stock_of
    ):
        a, b, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 2), (b.id, 2))
        command = partial(order.id, (a.id, 1, True), (b.id, 2, False))
        handler = ProcessPartialOrderHandler(uow_factory(), event_bus)

        first = await handler.handle(command)
        second = await handler.handle(command)

        assert first.applied is True
        assert second.applied is False
        assert second.order.status == OrderStatus.PARTIALLY_FULFILLED.value
        assert await stock_of(a.id) == 9
        assert await stock_of(b.id) == 2

    @pytest.mark.asyncio
    async def test_nothing_confirmed_rejects(self, uow_factory, event_bus, catalog, stock_of):
        a, _, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 2))

        result = await ProcessPartialOrderHandler(uow_factory(), event_bus).handle(
            partial(order.id, (a.id, 2, False))
        )

        assert result.order.status == OrderStatus.REJECTED.value
        assert await stock_of(a.id) == 10

    @pytest.mark.asyncio
    async def test_racing_decisions_never_oversell(
        self, uow_factory, event_bus, catalog, stock_of
    ):
        """Test: Two pending orders both want all of B, two confirms race."""
        _, b, _ = catalog
        [first] = await place(uow_factory, event_bus, (b.id, 2))
        [second] = await place(uow_factory, event_bus, (b.id, 2))

        results = await asyncio.gather(
            ConfirmOrRejectOrderHandler(uow_factory(), event_bus).handle(
                decide(first.id, "confirm")
            ),
            ConfirmOrRejectOrderHandler(uow_factory(), event_bus).handle(
                decide(second.id, "confirm")
            ),
            return_exceptions=True,
        )

        confirmed = [r for r in results if not isinstance(r, Exception)]
        assert len(confirmed) == 1
        assert await stock_of(b.id) == 0


class TestOrderQueries:
    @pytest.mark.asyncio
    async def test_pending_view_flags_short_orders(self, uow_factory, event_bus, catalog):
        a, b, _ = catalog
        [fits] = await place(uow_factory, event_bus, (a.id, 2))
        [short] = await place(uow_factory, event_bus, (b.id, 5))

        pending = await GetPendingConfirmationHandler(uow_factory()).handle(
            GetPendingConfirmationQuery(seller_id=SELLER)
        )

        flags = {view.order.id: view.can_fully_confirm for view in pending}
        assert flags == {fits.id: True, short.id: False}
        short_view = next(view for view in pending if view.order.id == short.id)
        assert short_view.order.items[0].current_stock == 2

    @pytest.mark.asyncio
    async def test_history_for_parties_only(self, uow_factory, event_bus, catalog):
        a, _, _ = catalog
        [order] = await place(uow_factory, event_bus, (a.id, 1))
        await ConfirmOrRejectOrderHandler(uow_factory(), event_bus).handle(
            decide(order.id, "confirm")
        )
        handler = GetOrderHistoryHandler(uow_factory())

        history = await handler.handle(GetOrderHistoryQuery(order_id=order.id, user_id=BUYER))

        assert [entry.status for entry in history] == [
            OrderStatus.PENDING_CONFIRMATION.value,
            OrderStatus.CONFIRMED.value,
        ]
        with pytest.raises(ForbiddenActionError):
            await handler.handle(GetOrderHistoryQuery(order_id=order.id, user_id=99))
