"""Repository ports (interfaces) for the Orders bounded context."""

from .order_repository import OrderRepository

__all__ = ["OrderRepository"]
