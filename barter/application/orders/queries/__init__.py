"""Order queries (read operations)."""

from .order_queries import GetOrderHistoryQuery, GetPendingConfirmationQuery

__all__ = ["GetPendingConfirmationQuery", "GetOrderHistoryQuery"]
