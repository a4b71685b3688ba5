"""Event Bus - domain events infrastructure.

Event Bus enables event-driven architecture:
- Domain aggregates emit events (TradeAccepted, TradeCompleted, OrderConfirmed, ...)
- Application services subscribe to events
- Decoupling: the domain does not know its subscribers
"""

import logging
from collections import defaultdict
from typing import Awaitable, Callable, Type

from barter.domain.shared import DomainEvent

logger = logging.getLogger(__name__)

# Event handler signature: async function that takes DomainEvent
EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """Event Bus for domain events.

    Singleton pattern - one instance per application. A handler subscribed to
    a base class receives every subclass event too, so subscribing to
    ``DomainEvent`` sees everything.

    Example:
        >>> event_bus = EventBus()
        >>> event_bus.subscribe(TradeCompletedEvent, notify_parties)
        >>> event_bus.subscribe(TradeCompletedEvent, refresh_inventory_views)

        >>> # Publish events (in the application layer, after commit)
        >>> await event_bus.publish_all(trade.get_domain_events())
    """

    def __init__(self) -> None:
        self._subscribers: dict[Type[DomainEvent], list[EventHandler]] = defaultdict(list)
        logger.info("event_bus.initialized")

    def subscribe(
        self, event_type: Type[DomainEvent], handler: EventHandler
    ) -> None:
        """Subscribe handler to event type.

        Args:
            event_type: Type of event (e.g., TradeAcceptedEvent).
            handler: Async function to call when the event is published.
        """
        self._subscribers[event_type].append(handler)
        logger.info(
            "event_bus.subscription_added",
            extra={
                "event_type": event_type.__name__,
                "handler": getattr(handler, "__name__", repr(handler)),
            },
        )

    def unsubscribe(
        self, event_type: Type[DomainEvent], handler: EventHandler
    ) -> None:
        if handler in self._subscribers[event_type]:
            self._subscribers[event_type].remove(handler)
            logger.info(
                "event_bus.subscription_removed",
                extra={
                    "event_type": event_type.__name__,
                    "handler": getattr(handler, "__name__", repr(handler)),
                },
            )

    def _handlers_for(self, event_type: Type[DomainEvent]) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for klass in event_type.__mro__:
            handlers.extend(self._subscribers.get(klass, []))
        return handlers

    async def publish(self, event: DomainEvent) -> None:
        """Publish a single domain event to every matching handler.

        A failing handler is logged and does not stop the others: the
        state change behind the event is already committed.
        """
        event_type = type(event)
        handlers = self._handlers_for(event_type)

        if not handlers:
            logger.debug(
                "event_bus.no_subscribers",
                extra={"event_type": event_type.__name__},
            )
            return

        logger.info(
            "event_bus.publishing",
            extra={
                "event_type": event_type.__name__,
                "handlers_count": len(handlers),
                "event_id": str(event.event_id),
            },
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "event_bus.handler_failed",
                    extra={
                        "event_type": event_type.__name__,
                        "handler": getattr(handler, "__name__", repr(handler)),
                        "error": str(e),
                    },
                    exc_info=True,
                )

    async def publish_all(self, events: list[DomainEvent]) -> None:
        """Publish multiple domain events in order."""
        if not events:
            return

        logger.info(
            "event_bus.publishing_batch",
            extra={"events_count": len(events)},
        )

        for event in events:
            await self.publish(event)

    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers.clear()
        logger.info("event_bus.cleared")

    def get_subscribers_count(self, event_type: Type[DomainEvent]) -> int:
        return len(self._subscribers.get(event_type, []))


# Singleton instance (can be injected as a dependency)
_event_bus_instance: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get singleton event bus instance."""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBus()
    return _event_bus_instance


def reset_event_bus() -> None:
    """Reset event bus (for testing)."""
    global _event_bus_instance
    _event_bus_instance = EventBus()
    logger.info("event_bus.reset")
