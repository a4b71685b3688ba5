"""Value objects for the Trading bounded context."""

from .enums import FairnessClass, PartyRole, ShippingStatus, TradeStatus
from .fairness import FairnessMetric, classify_ratio
from .shipping import DeliveryConfirmations, ShippingInfo
from .trade_line import TradeLine

__all__ = [
    "TradeStatus",
    "ShippingStatus",
    "PartyRole",
    "FairnessClass",
    "FairnessMetric",
    "classify_ratio",
    "ShippingInfo",
    "DeliveryConfirmations",
    "TradeLine",
]
