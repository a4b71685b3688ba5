"""Exceptions for the Orders bounded context."""

from .order_exceptions import (
    InvalidOrderDecisionError,
    NotOrderSellerError,
    OrderAlreadyProcessedError,
)

__all__ = [
    "InvalidOrderDecisionError",
    "NotOrderSellerError",
    "OrderAlreadyProcessedError",
]
