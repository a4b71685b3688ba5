"""Trading queries (read operations)."""

from .trade_queries import (
    GetCompletedTradesQuery,
    GetLogisticsQuery,
    GetTradeQuery,
    GetUserTradesQuery,
)

__all__ = [
    "GetUserTradesQuery",
    "GetLogisticsQuery",
    "GetCompletedTradesQuery",
    "GetTradeQuery",
]
