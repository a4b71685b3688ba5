"""SQLAlchemy persistence layer."""

from .models import (
    Base,
    InventoryRecordModel,
    OrderHistoryModel,
    OrderItemModel,
    OrderModel,
    TradeModel,
)
from .repositories import (
    SQLAlchemyInventoryRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyTradeRepository,
)
from .unit_of_work import SQLAlchemyUnitOfWork, create_unit_of_work

__all__ = [
    # ORM Models
    "Base",
    "TradeModel",
    "InventoryRecordModel",
    "OrderModel",
    "OrderItemModel",
    "OrderHistoryModel",
    # Repositories
    "SQLAlchemyTradeRepository",
    "SQLAlchemyInventoryRepository",
    "SQLAlchemyOrderRepository",
    # Unit of Work
    "SQLAlchemyUnitOfWork",
    "create_unit_of_work",
]
