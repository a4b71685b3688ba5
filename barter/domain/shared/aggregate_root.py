"""Base AggregateRoot class for domain model.

AggregateRoot - the main Entity of an aggregate. It controls access to
everything inside the aggregate and keeps it consistent.
"""

from typing import List

from .domain_event import DomainEvent
from .entity import Entity


class AggregateRoot(Entity):
    """Base class for aggregate roots in DDD.

    AggregateRoot is:
    - **Consistency boundary**: invariants always hold inside the aggregate
    - **Transaction boundary**: loaded and saved as a whole
    - **Event producer**: records domain events about its changes

    Each aggregate carries a ``version`` counter used for optimistic
    locking: the repository persists changes only while the stored version
    still matches the version the aggregate was loaded with.

    Example:
        >>> trade = Trade.propose(...)
        >>> trade.accept(by_user_id=counterpart_id)
        >>> events = trade.get_domain_events()  # [TradeProposedEvent, TradeAcceptedEvent]
    """

    def __init__(self, id: int | None = None, version: int = 0) -> None:
        """Initialize aggregate root.

        Args:
            id: Unique identifier. None for new aggregates.
            version: Stored version (0 for new aggregates).
        """
        super().__init__(id)
        self.version = version
        self._domain_events: List[DomainEvent] = []

    def add_domain_event(self, event: DomainEvent) -> None:
        """Add domain event to pending events list.

        Events are published by the application layer after a successful
        commit, never before.
        """
        self._domain_events.append(event)

    def get_domain_events(self) -> List[DomainEvent]:
        """Get all pending domain events."""
        return self._domain_events.copy()

    def clear_domain_events(self) -> None:
        """Clear all pending domain events (after they were published)."""
        self._domain_events.clear()

    @property
    def has_domain_events(self) -> bool:
        """Check if aggregate has pending domain events."""
        return len(self._domain_events) > 0
