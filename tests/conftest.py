"""Pytest configuration and fixtures.

User IDs used across the suite: 1 proposes, 2 is the counterpart, 3 buys,
99 is an outsider.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from barter.application.trading.commands import (
    AcceptTradeCommand,
    ProposeTradeCommand,
    UpdateShippingCommand,
)
from barter.application.trading.handlers import (
    AcceptTradeHandler,
    ProposeTradeHandler,
    UpdateShippingHandler,
)
from barter.domain.inventory import InventoryRecord
from barter.domain.trading import TradeLine
from barter.infrastructure.messaging import EventBus
from barter.infrastructure.persistence.sqlalchemy import Base, SQLAlchemyUnitOfWork


@pytest.fixture
def offered_line():
    """2 units at 50 - worth 100."""
    return TradeLine(product_id=10, quantity=2, unit_price=Decimal("50"))


@pytest.fixture
def requested_line():
    """1 unit at 100 - worth 100."""
    return TradeLine(product_id=20, quantity=1, unit_price=Decimal("100"))


# ============================================================================
# DATABASE
# ============================================================================


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite engine.

    A file (not ``:memory:``) so that several sessions can run side by side,
    the way concurrent requests do.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'barter.db'}",
        echo=False,  # Set to True for debug
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Important for async
    )


@pytest.fixture
def uow_factory(session_factory):
    """Fresh Unit of Work per call (one per simulated request)."""

    def _create() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return _create


@pytest.fixture
def uow(uow_factory):
    return uow_factory()


@pytest.fixture
def event_bus():
    return EventBus()


# ============================================================================
# SEED HELPERS
# ============================================================================


@pytest.fixture
def seed_product(uow_factory):
    """Create a listed product and return the stored InventoryRecord."""

    async def _seed(
        owner_id: int,
        stock: int = 10,
        unit_price: str = "50",
        name: str = "Product",
        category: str | None = None,
        available: bool = True,
    ) -> InventoryRecord:
        record = InventoryRecord.create_listing(
            owner_id=owner_id,
            name=name,
            unit_price=Decimal(unit_price),
            stock=stock,
            category=category,
            available_for_trade=available,
        )
        uow = uow_factory()
        async with uow:
            await uow.inventory.add(record)
            await uow.commit()
        return record

    return _seed


@pytest.fixture
def stock_of(uow_factory):
    """Read the current stock of a product."""

    async def _stock(product_id: int) -> int:
        uow = uow_factory()
        async with uow:
            record = await uow.inventory.get_by_id(product_id)
        return record.stock

    return _stock


@pytest.fixture
def shipped_trade(seed_product, uow_factory, event_bus):
    """Build an accepted, shipped trade: 2 cameras (50 each) for 1 lens (100).

    Returns a namespace with ``trade_id``, ``offered_id`` and ``requested_id``.
    """

    async def _build(offered_stock: int = 10, requested_stock: int = 5) -> SimpleNamespace:
        camera = await seed_product(1, stock=offered_stock, unit_price="50", name="Camera")
        lens = await seed_product(2, stock=requested_stock, unit_price="100", name="Lens")

        trade = await ProposeTradeHandler(uow_factory(), event_bus).handle(
            ProposeTradeCommand(
                proposer_id=1,
                offered_product_id=camera.id,
                requested_product_id=lens.id,
                qty_offered=2,
                qty_requested=1,
            )
        )
        await AcceptTradeHandler(uow_factory(), event_bus).handle(
            AcceptTradeCommand(trade_id=trade.id, user_id=2)
        )

        shipping = UpdateShippingHandler(uow_factory(), event_bus)
        await shipping.handle(
            UpdateShippingCommand(trade_id=trade.id, user_id=2, status="preparing")
        )
        await shipping.handle(
            UpdateShippingCommand(
                trade_id=trade.id,
                user_id=2,
                status="shipped",
                tracking_number="RR123456789UA",
                courier="Nova Poshta",
            )
        )
        return SimpleNamespace(trade_id=trade.id, offered_id=camera.id, requested_id=lens.id)

    return _build
