"""Entities for the Orders bounded context."""

from .order import Order

__all__ = ["Order"]
