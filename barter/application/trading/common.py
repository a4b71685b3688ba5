"""Shared plumbing for trading handlers."""

import logging

from barter.application.shared import UnitOfWork
from barter.domain.shared import AggregateNotFound, AggregateRoot
from barter.domain.trading import Trade
from barter.infrastructure.messaging import EventBus

logger = logging.getLogger(__name__)


async def load_trade(uow: UnitOfWork, trade_id: int) -> Trade:
    """Fetch a trade inside an open unit of work.

    Raises:
        AggregateNotFound: No trade with this ID.
    """
    trade = await uow.trades.get_by_id(trade_id)
    if trade is None:
        raise AggregateNotFound("Trade not found", trade_id=trade_id)
    return trade


async def publish_events(event_bus: EventBus, *aggregates: AggregateRoot) -> None:
    """Publish and clear pending events. Call only after commit."""
    for aggregate in aggregates:
        events = aggregate.get_domain_events()
        aggregate.clear_domain_events()
        await event_bus.publish_all(events)
