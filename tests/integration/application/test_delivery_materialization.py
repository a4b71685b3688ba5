"""Integration tests for delivery confirmation and inventory materialization.

Every handler call gets its own Unit of Work, the way separate HTTP
requests do.
"""

import asyncio

import pytest

from barter.application.inventory.handlers import (
    GetProductTradeHistoryHandler,
    GetReceivedProductsHandler,
)
from barter.application.inventory.queries import (
    GetProductTradeHistoryQuery,
    GetReceivedProductsQuery,
)
from barter.application.trading.commands import (
    AcceptTradeCommand,
    CompleteTradeCommand,
    ConfirmDeliveryCommand,
    ProposeTradeCommand,
    UpdateShippingCommand,
)
from barter.application.trading.handlers import (
    AcceptTradeHandler,
    CompleteTradeHandler,
    ConfirmDeliveryHandler,
    GetCompletedTradesHandler,
    GetTradeHandler,
    ProposeTradeHandler,
    UpdateShippingHandler,
)
from barter.application.trading.queries import GetCompletedTradesQuery, GetTradeQuery
from barter.application.trading.services import InventoryMaterializer
from barter.domain.shared import TransactionError
from barter.domain.trading import (
    InvalidTradeStateError,
    NotTradePartyError,
    PartyRole,
    ShippingStatus,
    TradeCompletedEvent,
    TradeStatus,
)


async def confirm(uow_factory, event_bus, trade_id: int, user_id: int):
    return await ConfirmDeliveryHandler(uow_factory(), event_bus).handle(
        ConfirmDeliveryCommand(trade_id=trade_id, user_id=user_id)
    )


async def read_trade(uow_factory, trade_id: int, user_id: int = 1):
    return await GetTradeHandler(uow_factory()).handle(
        GetTradeQuery(trade_id=trade_id, user_id=user_id)
    )


class TestDeliveryConfirmation:
    @pytest.mark.asyncio
    async def test_first_confirmation_only_sets_own_flag(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        ctx = await shipped_trade()

        result = await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)

        assert result.newly_confirmed is True
        assert result.materialization is None
        assert result.trade.proposer_confirmed is True
        assert result.trade.counterpart_confirmed is False
        assert result.trade.status == TradeStatus.ACCEPTED.value
        assert await stock_of(ctx.offered_id) == 10

    @pytest.mark.asyncio
    async def test_repeated_confirmation_is_noop(self, uow_factory, event_bus, shipped_trade):
        ctx = await shipped_trade()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)

        again = await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)

        assert again.newly_confirmed is False
        assert again.trade.proposer_confirmed is True
        assert again.trade.counterpart_confirmed is False

    @pytest.mark.asyncio
    async def test_outsider_cannot_confirm(self, uow_factory, event_bus, shipped_trade):
        ctx = await shipped_trade()

        with pytest.raises(NotTradePartyError):
            await confirm(uow_factory, event_bus, ctx.trade_id, user_id=99)

    @pytest.mark.asyncio
    async def test_confirmation_needs_shipment(self, uow_factory, event_bus, seed_product):
        camera = await seed_product(1, name="Camera")
        lens = await seed_product(2, name="Lens")
        trade = await ProposeTradeHandler(uow_factory(), event_bus).handle(
            ProposeTradeCommand(
                proposer_id=1,
                offered_product_id=camera.id,
                requested_product_id=lens.id,
                qty_offered=1,
                qty_requested=1,
            )
        )
        await AcceptTradeHandler(uow_factory(), event_bus).handle(
            AcceptTradeCommand(trade_id=trade.id, user_id=2)
        )
        await UpdateShippingHandler(uow_factory(), event_bus).handle(
            UpdateShippingCommand(trade_id=trade.id, user_id=1, status="preparing")
        )

        with pytest.raises(InvalidTradeStateError):
            await confirm(uow_factory, event_bus, trade.id, user_id=1)


class TestMaterialization:
    @pytest.mark.asyncio
    async def test_second_confirmation_completes_trade(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        """Test: 2 cameras go to user 2, 1 lens goes to user 1, sources drop once."""
        ctx = await shipped_trade(offered_stock=10, requested_stock=5)
        completed = []

        async def collect(event):
            completed.append(event)

        event_bus.subscribe(TradeCompletedEvent, collect)

        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        result = await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)

        assert result.trade.status == TradeStatus.COMPLETED.value
        assert result.trade.shipping_status == ShippingStatus.DELIVERED.value
        assert result.trade.completed_at is not None
        assert result.materialization.already_materialized is False

        assert await stock_of(ctx.offered_id) == 8
        assert await stock_of(ctx.requested_id) == 4
        assert await stock_of(result.materialization.counterpart_record_id) == 2
        assert await stock_of(result.materialization.proposer_record_id) == 1
        assert [e.trade_id for e in completed] == [ctx.trade_id]

    @pytest.mark.asyncio
    async def test_received_records_carry_provenance(
        self, uow_factory, event_bus, shipped_trade
    ):
        ctx = await shipped_trade()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)

        received = await GetReceivedProductsHandler(uow_factory()).handle(
            GetReceivedProductsQuery(user_id=2)
        )

        assert len(received) == 1
        record = received[0]
        assert record.name == "Camera"
        assert record.stock == 2
        assert record.owner_id == 2
        assert record.source_product_id == ctx.offered_id
        assert record.origin_trade_id == ctx.trade_id
        assert record.acquired_date is not None
        assert record.available_for_trade is False

    @pytest.mark.asyncio
    async def test_completing_twice_is_noop(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        ctx = await shipped_trade()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)

        result = await CompleteTradeHandler(uow_factory(), event_bus).handle(
            CompleteTradeCommand(trade_id=ctx.trade_id, user_id=1)
        )
        late = await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)

        assert result.materialization.already_materialized is True
        assert late.newly_confirmed is False
        assert await stock_of(ctx.offered_id) == 8
        assert await stock_of(ctx.requested_id) == 4

    @pytest.mark.asyncio
    async def test_complete_needs_both_confirmations(
        self, uow_factory, event_bus, shipped_trade
    ):
        ctx = await shipped_trade()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)

        with pytest.raises(InvalidTradeStateError):
            await CompleteTradeHandler(uow_factory(), event_bus).handle(
                CompleteTradeCommand(trade_id=ctx.trade_id, user_id=1)
            )

    @pytest.mark.asyncio
    async def test_stock_shortfall_rolls_back(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        """Test: Cameras sold elsewhere meanwhile, the confirmation stands but nothing moves."""
        ctx = await shipped_trade(offered_stock=10)
        uow = uow_factory()
        async with uow:
            await uow.inventory.decrement_stock(ctx.offered_id, 9)
            await uow.commit()

        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        result = await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)

        assert result.newly_confirmed is True
        assert result.materialization is None
        assert result.materialization_deferred is True
        assert result.trade.status == TradeStatus.ACCEPTED.value
        trade = await read_trade(uow_factory, ctx.trade_id)
        assert trade.status == TradeStatus.ACCEPTED.value
        assert trade.proposer_confirmed is True
        assert trade.counterpart_confirmed is True
        assert await stock_of(ctx.offered_id) == 1
        assert await stock_of(ctx.requested_id) == 5
        received = await GetReceivedProductsHandler(uow_factory()).handle(
            GetReceivedProductsQuery(user_id=1)
        )
        assert received == []

    @pytest.mark.asyncio
    async def test_manual_complete_reports_rollback(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        ctx = await shipped_trade(offered_stock=10)
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        uow = uow_factory()
        async with uow:
            await uow.inventory.decrement_stock(ctx.offered_id, 9)
            await uow.commit()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)

        with pytest.raises(TransactionError):
            await CompleteTradeHandler(uow_factory(), event_bus).handle(
                CompleteTradeCommand(trade_id=ctx.trade_id, user_id=1)
            )

        assert await stock_of(ctx.offered_id) == 1

    @pytest.mark.asyncio
    async def test_retry_stalled_finishes_trade(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        ctx = await shipped_trade(offered_stock=10)
        uow = uow_factory()
        async with uow:
            await uow.inventory.decrement_stock(ctx.offered_id, 9)
            await uow.commit()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        deferred = await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)
        assert deferred.materialization_deferred is True

        materializer = InventoryMaterializer(uow_factory(), event_bus)
        assert await materializer.retry_stalled(limit=10) == []

        async with uow:
            await uow.inventory.increment_stock(ctx.offered_id, 4)
            await uow.commit()

        results = await materializer.retry_stalled(limit=10)

        assert [r.trade_id for r in results] == [ctx.trade_id]
        assert results[0].already_materialized is False
        assert await stock_of(ctx.offered_id) == 3
        trade = await read_trade(uow_factory, ctx.trade_id)
        assert trade.status == TradeStatus.COMPLETED.value

    @pytest.mark.asyncio
    async def test_concurrent_confirmations_materialize_once(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        """Test: Both parties confirm at the same moment."""
        ctx = await shipped_trade(offered_stock=10, requested_stock=5)

        results = await asyncio.gather(
            confirm(uow_factory, event_bus, ctx.trade_id, user_id=1),
            confirm(uow_factory, event_bus, ctx.trade_id, user_id=2),
            return_exceptions=True,
        )

        for result in results:
            assert not isinstance(result, Exception), result
        fresh = [
            r.materialization
            for r in results
            if r.materialization is not None and not r.materialization.already_materialized
        ]
        assert len(fresh) == 1

        trade = await read_trade(uow_factory, ctx.trade_id)
        assert trade.status == TradeStatus.COMPLETED.value
        assert await stock_of(ctx.offered_id) == 8
        assert await stock_of(ctx.requested_id) == 4

    @pytest.mark.asyncio
    async def test_parallel_materializers_move_stock_once(
        self, uow_factory, event_bus, shipped_trade, stock_of
    ):
        ctx = await shipped_trade()
        uow = uow_factory()
        async with uow:
            for role in (PartyRole.PROPOSER, PartyRole.COUNTERPART):
                await uow.trades.mark_confirmed(ctx.trade_id, role)
            await uow.commit()

        materializers = [InventoryMaterializer(uow_factory(), event_bus) for _ in range(3)]
        results = await asyncio.gather(
            *(materializer.materialize(ctx.trade_id) for materializer in materializers)
        )

        assert sorted(r.already_materialized for r in results) == [False, True, True]
        assert await stock_of(ctx.offered_id) == 8


class TestTradeHistory:
    @pytest.mark.asyncio
    async def test_completed_trades_from_each_side(self, uow_factory, event_bus, shipped_trade):
        ctx = await shipped_trade()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)
        handler = GetCompletedTradesHandler(uow_factory())

        [proposer_view] = await handler.handle(GetCompletedTradesQuery(user_id=1))
        [counterpart_view] = await handler.handle(GetCompletedTradesQuery(user_id=2))

        assert proposer_view.role == "proposer"
        assert proposer_view.with_user_id == 2
        assert (proposer_view.given_product_id, proposer_view.given_quantity) == (ctx.offered_id, 2)
        assert (proposer_view.received_product_id, proposer_view.received_quantity) == (
            ctx.requested_id,
            1,
        )
        assert counterpart_view.given_product_id == ctx.requested_id
        assert counterpart_view.with_user_id == 1

    @pytest.mark.asyncio
    async def test_received_product_can_be_traded_again(
        self, uow_factory, event_bus, shipped_trade, seed_product, stock_of
    ):
        """Test: User 2 passes one received camera on to user 3; history follows it."""
        ctx = await shipped_trade()
        await confirm(uow_factory, event_bus, ctx.trade_id, user_id=1)
        result = await confirm(uow_factory, event_bus, ctx.trade_id, user_id=2)
        received_camera_id = result.materialization.counterpart_record_id
        book = await seed_product(3, stock=1, unit_price="100", name="Book")

        resale = await ProposeTradeHandler(uow_factory(), event_bus).handle(
            ProposeTradeCommand(
                proposer_id=2,
                offered_product_id=received_camera_id,
                requested_product_id=book.id,
                qty_offered=2,
                qty_requested=1,
            )
        )
        await AcceptTradeHandler(uow_factory(), event_bus).handle(
            AcceptTradeCommand(trade_id=resale.id, user_id=3)
        )
        shipping = UpdateShippingHandler(uow_factory(), event_bus)
        await shipping.handle(
            UpdateShippingCommand(trade_id=resale.id, user_id=2, status="preparing")
        )
        await shipping.handle(
            UpdateShippingCommand(
                trade_id=resale.id,
                user_id=2,
                status="shipped",
                tracking_number="TN-2",
                courier="UPS",
            )
        )
        await confirm(uow_factory, event_bus, resale.id, user_id=2)
        await confirm(uow_factory, event_bus, resale.id, user_id=3)

        assert await stock_of(received_camera_id) == 0
        history = await GetProductTradeHistoryHandler(uow_factory()).handle(
            GetProductTradeHistoryQuery(product_id=ctx.offered_id)
        )
        assert {t.id for t in history} == {ctx.trade_id, resale.id}
