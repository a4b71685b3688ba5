"""Trade update notifications (push and poll)."""

from .trade_update_source import (
    DEFAULT_POLL_INTERVAL,
    PollingTradeUpdateSource,
    PushTradeUpdateSource,
    TradeUpdateSource,
    TransientNetworkError,
)

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "TradeUpdateSource",
    "PushTradeUpdateSource",
    "PollingTradeUpdateSource",
    "TransientNetworkError",
]
