"""Integration tests for SQLAlchemyInventoryRepository."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from barter.domain.inventory import InventoryRecord, Provenance
from barter.domain.shared import AggregateNotFound
from barter.domain.trading import Trade, TradeLine


async def completed_trade_id(uow) -> int:
    """Store a trade row so provenance can point at it."""
    trade = Trade.propose(
        proposer_id=1,
        counterpart_id=2,
        offered=TradeLine(product_id=1, quantity=1, unit_price=Decimal("1")),
        requested=TradeLine(product_id=2, quantity=1, unit_price=Decimal("1")),
    )
    async with uow:
        await uow.trades.add(trade)
        await uow.commit()
    return trade.id


async def add_received(uow, source: InventoryRecord, owner_id: int, trade_id: int, quantity=1):
    record = InventoryRecord.acquire_from_trade(
        source=source,
        owner_id=owner_id,
        quantity=quantity,
        provenance=Provenance(trade_id=trade_id, acquired_date=datetime.now(timezone.utc)),
    )
    async with uow:
        await uow.inventory.add(record)
        await uow.commit()
    return record


class TestInventoryRepository:
    """Integration tests for the inventory_records table."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, uow, seed_product):
        product = await seed_product(1, stock=4, unit_price="12.50", name="Kettle", category="Home")

        async with uow:
            loaded = await uow.inventory.get_by_id(product.id)

        assert loaded.owner_id == 1
        assert loaded.name == "Kettle"
        assert loaded.category == "Home"
        assert loaded.unit_price == Decimal("12.50")
        assert loaded.stock == 4
        assert loaded.available_for_trade is True
        assert loaded.origin is None

    @pytest.mark.asyncio
    async def test_decrement_is_conditional(self, uow, seed_product, stock_of):
        """Test: Stock never goes below zero, a short decrement changes nothing."""
        product = await seed_product(1, stock=3)

        async with uow:
            assert await uow.inventory.decrement_stock(product.id, 2) is True
            assert await uow.inventory.decrement_stock(product.id, 2) is False
            await uow.commit()

        assert await stock_of(product.id) == 1

    @pytest.mark.asyncio
    async def test_increment_stock_and_provenance(self, uow, seed_product, stock_of):
        trade_id = await completed_trade_id(uow)
        product = await seed_product(1, stock=1)
        acquired = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)

        async with uow:
            await uow.inventory.increment_stock(
                product.id, 2, origin=Provenance(trade_id=trade_id, acquired_date=acquired)
            )
            await uow.commit()

        async with uow:
            loaded = await uow.inventory.get_by_id(product.id)
        assert loaded.stock == 3
        assert loaded.origin.trade_id == trade_id
        assert loaded.origin.acquired_date == acquired

    @pytest.mark.asyncio
    async def test_increment_missing_product_fails(self, uow):
        with pytest.raises(AggregateNotFound):
            async with uow:
                await uow.inventory.increment_stock(404, 1)

    @pytest.mark.asyncio
    async def test_find_derived(self, uow, seed_product):
        trade_id = await completed_trade_id(uow)
        source = await seed_product(1, name="Camera")
        received = await add_received(uow, source, owner_id=2, trade_id=trade_id)

        async with uow:
            found = await uow.inventory.find_derived(owner_id=2, source_product_id=source.id)
            missing = await uow.inventory.find_derived(owner_id=3, source_product_id=source.id)

        assert found.id == received.id
        assert found.source_product_id == source.id
        assert missing is None

    @pytest.mark.asyncio
    async def test_lineage_follows_derived_records(self, uow, seed_product):
        """Test: Original → received by 2 → received by 3, plus an unrelated product."""
        trade_id = await completed_trade_id(uow)
        original = await seed_product(1, name="Camera")
        unrelated = await seed_product(1, name="Tripod")
        first_hop = await add_received(uow, original, owner_id=2, trade_id=trade_id)
        second_hop = await add_received(uow, first_hop, owner_id=3, trade_id=trade_id)

        async with uow:
            lineage = await uow.inventory.lineage_ids(original.id)
            tail = await uow.inventory.lineage_ids(second_hop.id)

        assert sorted(lineage) == sorted([original.id, first_hop.id, second_hop.id])
        assert unrelated.id not in lineage
        assert tail == [second_hop.id]

    @pytest.mark.asyncio
    async def test_list_received_only_has_provenance(self, uow, seed_product):
        trade_id = await completed_trade_id(uow)
        source = await seed_product(1, name="Camera")
        await seed_product(2, name="Own listing")
        received = await add_received(uow, source, owner_id=2, trade_id=trade_id)

        async with uow:
            records = await uow.inventory.list_received(2)

        assert [r.id for r in records] == [received.id]
        assert records[0].origin.trade_id == trade_id

    @pytest.mark.asyncio
    async def test_available_for_trade_excludes_caller_and_empty(self, uow, seed_product):
        mine = await seed_product(1, name="Mine")
        theirs = await seed_product(2, name="Theirs")
        await seed_product(2, name="Hidden", available=False)
        await seed_product(2, name="Sold out", stock=0, available=False)

        async with uow:
            records = await uow.inventory.list_available_for_trade(exclude_owner_id=1)

        assert [r.id for r in records] == [theirs.id]
        assert mine.id not in [r.id for r in records]
