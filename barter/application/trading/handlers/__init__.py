"""Trading use case handlers."""

from .delivery_handlers import CompleteTradeHandler, ConfirmDeliveryHandler
from .lifecycle_handlers import (
    AcceptTradeHandler,
    CancelTradeHandler,
    RejectTradeHandler,
    UpdateShippingHandler,
)
from .negotiation_handlers import ProposeTradeHandler, UpdateTradeHandler
from .trade_query_handlers import (
    GetCompletedTradesHandler,
    GetLogisticsHandler,
    GetTradeHandler,
    GetUserTradesHandler,
)

__all__ = [
    "ProposeTradeHandler",
    "UpdateTradeHandler",
    "AcceptTradeHandler",
    "RejectTradeHandler",
    "CancelTradeHandler",
    "UpdateShippingHandler",
    "ConfirmDeliveryHandler",
    "CompleteTradeHandler",
    "GetUserTradesHandler",
    "GetLogisticsHandler",
    "GetCompletedTradesHandler",
    "GetTradeHandler",
]
