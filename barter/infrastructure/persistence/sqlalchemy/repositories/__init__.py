"""Repository implementations for SQLAlchemy."""

from .inventory_repository import SQLAlchemyInventoryRepository
from .order_repository import SQLAlchemyOrderRepository
from .trade_repository import SQLAlchemyTradeRepository

__all__ = [
    "SQLAlchemyTradeRepository",
    "SQLAlchemyInventoryRepository",
    "SQLAlchemyOrderRepository",
]
