"""Base DomainEvent class for event-driven architecture.

DomainEvent - something important that happened in the domain and that other
parts of the system may react to. The domain does not know who handles it.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for all domain events.

    Events are immutable, named in past tense (TradeAccepted, not
    AcceptTrade), carry the data describing what happened, and get a unique
    id plus a UTC timestamp on creation.

    Example:
        >>> @dataclass(frozen=True)
        ... class TradeAcceptedEvent(DomainEvent):
        ...     trade_id: int
        ...     proposer_id: int
        ...     counterpart_id: int

        >>> event_bus.subscribe(TradeAcceptedEvent, notify_proposer)
    """

    event_id: UUID = field(default_factory=uuid4, init=False)
    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), init=False
    )

    @property
    def event_name(self) -> str:
        """Event class name (e.g. "TradeCompletedEvent")."""
        return self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.event_name}(event_id={self.event_id}, occurred_at={self.occurred_at})"
