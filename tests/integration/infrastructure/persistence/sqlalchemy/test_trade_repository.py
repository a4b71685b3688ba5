"""Integration tests for SQLAlchemyTradeRepository."""

from decimal import Decimal

import pytest

from barter.domain.shared import ConflictError
from barter.domain.trading import (
    PartyRole,
    ShippingStatus,
    Trade,
    TradeLine,
    TradeStatus,
)


def new_trade(proposer_id: int = 1, counterpart_id: int = 2) -> Trade:
    return Trade.propose(
        proposer_id=proposer_id,
        counterpart_id=counterpart_id,
        offered=TradeLine(product_id=10, quantity=2, unit_price=Decimal("50")),
        requested=TradeLine(product_id=20, quantity=1, unit_price=Decimal("100")),
        notes="Swap?",
    )


async def store(uow, trade: Trade) -> Trade:
    async with uow:
        await uow.trades.add(trade)
        await uow.commit()
    return trade


async def ship(uow, trade_id: int) -> None:
    async with uow:
        trade = await uow.trades.get_by_id(trade_id)
        trade.accept(by_user_id=trade.counterpart_id)
        trade.update_shipping(trade.counterpart_id, ShippingStatus.PREPARING)
        trade.update_shipping(
            trade.counterpart_id, ShippingStatus.SHIPPED, tracking_number="TN", courier="UPS"
        )
        await uow.trades.save(trade, expected_status=TradeStatus.PENDING)
        await uow.commit()


class TestTradeRepository:
    """Integration tests for the trades table."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, uow):
        """Test: Every field survives the round trip through the database."""
        # Arrange
        trade = await store(uow, new_trade())

        # Act
        async with uow:
            loaded = await uow.trades.get_by_id(trade.id)

        # Assert
        assert loaded is not None
        assert loaded.id == trade.id
        assert loaded.version == 1
        assert loaded.status == TradeStatus.PENDING
        assert loaded.offered.unit_price == Decimal("50")
        assert loaded.requested.quantity == 1
        assert loaded.value_ratio == Decimal("1.00")
        assert loaded.shipping.status == ShippingStatus.NONE
        assert loaded.notes == "Swap?"

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, uow):
        async with uow:
            assert await uow.trades.get_by_id(404) is None

    @pytest.mark.asyncio
    async def test_save_bumps_version(self, uow):
        trade = await store(uow, new_trade())

        async with uow:
            loaded = await uow.trades.get_by_id(trade.id)
            loaded.accept(by_user_id=2)
            await uow.trades.save(loaded, expected_status=TradeStatus.PENDING)
            await uow.commit()

        async with uow:
            stored = await uow.trades.get_by_id(trade.id)

        assert stored.status == TradeStatus.ACCEPTED
        assert stored.accepted_at is not None
        assert stored.version == 2

    @pytest.mark.asyncio
    async def test_stale_save_conflicts(self, uow_factory):
        """Test: Two writers read version 1, only the first save lands."""
        trade = await store(uow_factory(), new_trade())

        first, second = uow_factory(), uow_factory()
        async with first:
            winner = await first.trades.get_by_id(trade.id)
        async with second:
            loser = await second.trades.get_by_id(trade.id)

        async with first:
            winner.accept(by_user_id=2)
            await first.trades.save(winner, expected_status=TradeStatus.PENDING)
            await first.commit()

        loser.cancel(by_user_id=1)
        with pytest.raises(ConflictError):
            async with second:
                await second.trades.save(loser, expected_status=TradeStatus.PENDING)

        async with first:
            stored = await first.trades.get_by_id(trade.id)
        assert stored.status == TradeStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_mark_confirmed_writes_one_flag(self, uow):
        trade = await store(uow, new_trade())
        await ship(uow, trade.id)

        async with uow:
            assert await uow.trades.mark_confirmed(trade.id, PartyRole.COUNTERPART) is True
            await uow.commit()

        async with uow:
            stored = await uow.trades.get_by_id(trade.id)
        assert stored.confirmations.counterpart_confirmed is True
        assert stored.confirmations.proposer_confirmed is False

    @pytest.mark.asyncio
    async def test_mark_confirmed_needs_shipped_trade(self, uow):
        trade = await store(uow, new_trade())

        async with uow:
            assert await uow.trades.mark_confirmed(trade.id, PartyRole.PROPOSER) is False

    @pytest.mark.asyncio
    async def test_list_for_user_filters(self, uow):
        as_proposer = await store(uow, new_trade(proposer_id=1, counterpart_id=2))
        as_counterpart = await store(uow, new_trade(proposer_id=2, counterpart_id=1))
        await store(uow, new_trade(proposer_id=2, counterpart_id=3))

        async with uow:
            everything = await uow.trades.list_for_user(1)
            proposed = await uow.trades.list_for_user(1, role=PartyRole.PROPOSER)
            received = await uow.trades.list_for_user(1, role=PartyRole.COUNTERPART)
            accepted = await uow.trades.list_for_user(1, status=TradeStatus.ACCEPTED)

        assert {t.id for t in everything} == {as_proposer.id, as_counterpart.id}
        assert [t.id for t in proposed] == [as_proposer.id]
        assert [t.id for t in received] == [as_counterpart.id]
        assert accepted == []

    @pytest.mark.asyncio
    async def test_list_awaiting_materialization(self, uow):
        """Test: Only ACCEPTED trades with both flags set are returned."""
        both = await store(uow, new_trade())
        one = await store(uow, new_trade())
        for trade in (both, one):
            await ship(uow, trade.id)

        async with uow:
            await uow.trades.mark_confirmed(both.id, PartyRole.PROPOSER)
            await uow.trades.mark_confirmed(both.id, PartyRole.COUNTERPART)
            await uow.trades.mark_confirmed(one.id, PartyRole.PROPOSER)
            await uow.commit()

        async with uow:
            stalled = await uow.trades.list_awaiting_materialization(limit=10)

        assert [t.id for t in stalled] == [both.id]
        assert stalled[0].ready_for_completion is True
