"""Exceptions for the Trading bounded context."""

from .trading_exceptions import (
    InvalidShippingUpdateError,
    InvalidTradeStateError,
    MissingRejectionReasonError,
    NotTradePartyError,
    OwnershipError,
    QuantityOutOfRangeError,
    SelfTradeError,
    UnknownStatusError,
)

__all__ = [
    "InvalidShippingUpdateError",
    "InvalidTradeStateError",
    "MissingRejectionReasonError",
    "NotTradePartyError",
    "OwnershipError",
    "QuantityOutOfRangeError",
    "SelfTradeError",
    "UnknownStatusError",
]
