"""Trade update notifications - push or poll behind one interface.

Clients waiting for the other party (acceptance, shipping, delivery
confirmation) subscribe to a TradeUpdateSource. The engine never depends on
how updates travel: in-process deployments push from the event bus, remote
ones poll.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Iterable, Optional

from barter.application.trading.dtos import TradeDTO
from barter.domain.shared import DomainEvent
from barter.domain.trading import (
    DeliveryConfirmedEvent,
    ShippingUpdatedEvent,
    TradeAcceptedEvent,
    TradeCancelledEvent,
    TradeCompletedEvent,
    TradeProposedEvent,
    TradeRejectedEvent,
    TradeUpdatedEvent,
)
from barter.infrastructure.messaging import EventBus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 15.0

TradeUpdateListener = Callable[[TradeDTO], Awaitable[None]]
TradeFetcher = Callable[[int], Awaitable[Optional[TradeDTO]]]
TradeListFetcher = Callable[[], Awaitable[list[TradeDTO]]]

TRADE_EVENTS = (
    TradeProposedEvent,
    TradeUpdatedEvent,
    TradeAcceptedEvent,
    TradeRejectedEvent,
    TradeCancelledEvent,
    ShippingUpdatedEvent,
    DeliveryConfirmedEvent,
    TradeCompletedEvent,
)


class TransientNetworkError(Exception):
    """A fetch failed for a reason expected to go away (timeout, reset, 5xx).

    Pollers swallow it and try again on the next tick.
    """


class TradeUpdateSource(ABC):
    """Stream of trade changes delivered to registered listeners.

    Example:
        >>> source = PollingTradeUpdateSource(fetch=load_my_open_trades)
        >>> source.subscribe(refresh_view)
        >>> await source.start()
        ...
        >>> await source.stop()
    """

    def __init__(self) -> None:
        self._listeners: list[TradeUpdateListener] = []

    def subscribe(self, listener: TradeUpdateListener) -> None:
        self._listeners.append(listener)

    async def _dispatch(self, trade: TradeDTO) -> None:
        for listener in self._listeners:
            try:
                await listener(trade)
            except Exception:
                logger.exception(
                    "trade_updates.listener_failed", extra={"trade_id": trade.id}
                )

    @abstractmethod
    async def start(self) -> None:
        pass

    @abstractmethod
    async def stop(self) -> None:
        pass


class PushTradeUpdateSource(TradeUpdateSource):
    """Updates pushed by the in-process event bus after each commit."""

    def __init__(
        self,
        event_bus: EventBus,
        fetch_trade: TradeFetcher,
        event_types: Iterable[type[DomainEvent]] = TRADE_EVENTS,
    ) -> None:
        super().__init__()
        self._event_bus = event_bus
        self._fetch_trade = fetch_trade
        self._event_types = tuple(event_types)
        self._started = False

    async def start(self) -> None:
        if self._started:
            return
        for event_type in self._event_types:
            self._event_bus.subscribe(event_type, self._on_event)
        self._started = True

    async def stop(self) -> None:
        if not self._started:
            return
        for event_type in self._event_types:
            self._event_bus.unsubscribe(event_type, self._on_event)
        self._started = False

    async def _on_event(self, event: DomainEvent) -> None:
        trade = await self._fetch_trade(event.trade_id)
        if trade is not None:
            await self._dispatch(trade)


class PollingTradeUpdateSource(TradeUpdateSource):
    """Updates discovered by periodically re-fetching the caller's trades.

    A trade is reported when it first appears and whenever its version
    changes. Transient fetch failures are logged and skipped; the next tick
    catches up.
    """

    def __init__(
        self,
        fetch: TradeListFetcher,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        super().__init__()
        self._fetch = fetch
        self._interval = interval
        self._seen: dict[int, int] = {}
        self._task: Optional[asyncio.Task] = None

    async def poll_once(self) -> list[TradeDTO]:
        """Fetch once and dispatch what changed since the previous poll."""
        try:
            trades = await self._fetch()
        except TransientNetworkError as e:
            logger.warning("trade_updates.poll_failed", extra={"error": str(e)})
            return []

        changed = [trade for trade in trades if self._seen.get(trade.id) != trade.version]
        for trade in changed:
            self._seen[trade.id] = trade.version
            await self._dispatch(trade)
        return changed

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self._interval)

    async def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
