"""Base Query class for the CQRS pattern.

Query - a request for data (read operation) without side effects.
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class Query(ABC):
    """Base class for all queries.

    Query characteristics:
    - **Read-only**: never changes data
    - **Noun-based naming**: GetUserTrades, GetPendingOrders
    - **Explicit caller**: the user ID scopes what may be seen

    Example:
        >>> @dataclass(frozen=True)
        ... class GetUserTradesQuery(Query):
        ...     user_id: int
        ...     status: str | None = None

        >>> trades = await handler.handle(GetUserTradesQuery(user_id=7))
    """

    pass
