"""Inventory commands (write operations)."""

from .set_trade_availability import SetTradeAvailabilityCommand

__all__ = ["SetTradeAvailabilityCommand"]
