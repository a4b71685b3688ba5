"""Data Transfer Objects for the orders application layer."""

from .order_dto import (
    OrderDecisionResultDTO,
    OrderDTO,
    OrderHistoryEntryDTO,
    OrderLineDTO,
    PendingOrderDTO,
)

__all__ = [
    "OrderDTO",
    "OrderLineDTO",
    "PendingOrderDTO",
    "OrderDecisionResultDTO",
    "OrderHistoryEntryDTO",
]
