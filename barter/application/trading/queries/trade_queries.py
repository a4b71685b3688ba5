"""Trading queries (read operations)."""

from dataclasses import dataclass

from barter.application.shared import Query


@dataclass(frozen=True)
class GetUserTradesQuery(Query):
    """Trades where the user is a party, optionally filtered.

    Example:
        >>> GetUserTradesQuery(user_id=7, status="pending", role="counterpart")
    """

    user_id: int
    status: str | None = None
    role: str | None = None
    """``proposer`` or ``counterpart``; None for both."""


@dataclass(frozen=True)
class GetLogisticsQuery(Query):
    """Accepted trades with an open shipping workflow."""

    user_id: int


@dataclass(frozen=True)
class GetCompletedTradesQuery(Query):
    """Completed trades, from the caller's perspective (given / received / with_user)."""

    user_id: int


@dataclass(frozen=True)
class GetTradeQuery(Query):
    """A single trade; only its parties may see it."""

    trade_id: int
    user_id: int
