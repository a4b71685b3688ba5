"""SQLAlchemy ORM models.

Database models for trades, inventory records and orders.
"""

from .base import Base
from .inventory_model import InventoryRecordModel
from .order_model import OrderHistoryModel, OrderItemModel, OrderModel
from .trade_model import TradeModel

__all__ = [
    # Base
    "Base",
    # Trading
    "TradeModel",
    # Inventory
    "InventoryRecordModel",
    # Orders
    "OrderModel",
    "OrderItemModel",
    "OrderHistoryModel",
]
