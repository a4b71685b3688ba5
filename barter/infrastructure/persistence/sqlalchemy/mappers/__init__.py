"""Mappers for Domain ↔ ORM conversion."""

from .inventory_mapper import InventoryRecordMapper
from .order_mapper import OrderMapper
from .trade_mapper import TradeMapper

__all__ = ["TradeMapper", "InventoryRecordMapper", "OrderMapper"]
