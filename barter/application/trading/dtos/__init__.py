"""Data Transfer Objects for the trading application layer."""

from .trade_dto import (
    DeliveryConfirmationResult,
    MaterializationResult,
    PerspectiveTradeDTO,
    TradeDTO,
)

__all__ = [
    "TradeDTO",
    "PerspectiveTradeDTO",
    "MaterializationResult",
    "DeliveryConfirmationResult",
]
