"""Integration tests for the materialization retry task.

The task runs synchronously (``apply``) the way a worker process would: each
run on a fresh event loop. These tests are plain functions so no loop is
running around them.
"""

import asyncio
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from barter.application.trading.commands import (
    AcceptTradeCommand,
    ConfirmDeliveryCommand,
    ProposeTradeCommand,
    UpdateShippingCommand,
)
from barter.application.trading.handlers import (
    AcceptTradeHandler,
    ConfirmDeliveryHandler,
    ProposeTradeHandler,
    UpdateShippingHandler,
)
from barter.domain.inventory import InventoryRecord
from barter.infrastructure.messaging import EventBus
from barter.infrastructure.persistence.sqlalchemy import Base, SQLAlchemyUnitOfWork
from barter.presentation.workers.tasks import materialization_tasks


async def stall_trade(database_url: str) -> int:
    """Accepted, shipped trade with both confirmations whose stock move rolled back.

    Camera stock drops to 1 before the second confirmation, then gets back
    to 5, so the next sweep can complete it.
    """
    engine = create_async_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    event_bus = EventBus()

    def uow() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    camera = InventoryRecord.create_listing(
        owner_id=1, name="Camera", unit_price=Decimal("50"), stock=10, available_for_trade=True
    )
    lens = InventoryRecord.create_listing(
        owner_id=2, name="Lens", unit_price=Decimal("100"), stock=5, available_for_trade=True
    )
    seed = uow()
    async with seed:
        await seed.inventory.add(camera)
        await seed.inventory.add(lens)
        await seed.commit()

    trade = await ProposeTradeHandler(uow(), event_bus).handle(
        ProposeTradeCommand(
            proposer_id=1,
            offered_product_id=camera.id,
            requested_product_id=lens.id,
            qty_offered=2,
            qty_requested=1,
        )
    )
    await AcceptTradeHandler(uow(), event_bus).handle(
        AcceptTradeCommand(trade_id=trade.id, user_id=2)
    )
    await UpdateShippingHandler(uow(), event_bus).handle(
        UpdateShippingCommand(trade_id=trade.id, user_id=2, status="preparing")
    )
    await UpdateShippingHandler(uow(), event_bus).handle(
        UpdateShippingCommand(
            trade_id=trade.id,
            user_id=2,
            status="shipped",
            tracking_number="RR1",
            courier="Nova Poshta",
        )
    )
    await ConfirmDeliveryHandler(uow(), event_bus).handle(
        ConfirmDeliveryCommand(trade_id=trade.id, user_id=1)
    )

    stock = uow()
    async with stock:
        await stock.inventory.decrement_stock(camera.id, 9)
        await stock.commit()
    deferred = await ConfirmDeliveryHandler(uow(), event_bus).handle(
        ConfirmDeliveryCommand(trade_id=trade.id, user_id=2)
    )
    assert deferred.materialization_deferred is True

    async with stock:
        await stock.inventory.increment_stock(camera.id, 4)
        await stock.commit()

    await engine.dispose()
    return trade.id


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'worker.db'}"
    monkeypatch.setattr(
        materialization_tasks, "get_settings", lambda: SimpleNamespace(database_url=url)
    )
    return url


@pytest.fixture
def created_engines(monkeypatch):
    """Engines opened by the task, in order."""
    engines = []
    real_create = materialization_tasks.create_async_engine

    def _create(*args, **kwargs):
        engine = real_create(*args, **kwargs)
        engines.append(engine)
        return engine

    monkeypatch.setattr(materialization_tasks, "create_async_engine", _create)
    return engines


class TestRetryStalledMaterializationsTask:
    def test_sweep_completes_stalled_trade(self, database_url):
        trade_id = asyncio.run(stall_trade(database_url))

        result = materialization_tasks.retry_stalled_materializations.apply(kwargs={"limit": 10})

        assert result.successful(), result.traceback
        assert result.get() == {
            "materialized": 1,
            "already_materialized": 0,
            "trade_ids": [trade_id],
        }

    def test_every_run_gets_its_own_engine(self, database_url, created_engines):
        """Test: Consecutive runs (each on a new loop) do not share connections."""
        asyncio.run(stall_trade(database_url))

        first = materialization_tasks.retry_stalled_materializations.apply(kwargs={"limit": 10})
        second = materialization_tasks.retry_stalled_materializations.apply(kwargs={"limit": 10})

        assert first.successful(), first.traceback
        assert second.successful(), second.traceback
        assert first.get()["materialized"] == 1
        assert second.get()["materialized"] == 0
        assert len(created_engines) == 2
        assert created_engines[0] is not created_engines[1]
