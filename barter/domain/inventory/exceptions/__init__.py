"""Exceptions for the Inventory bounded context."""

from .inventory_exceptions import InsufficientStockError, NotProductOwnerError

__all__ = ["InsufficientStockError", "NotProductOwnerError"]
