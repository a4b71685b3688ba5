"""Exceptions for the Trading bounded context."""

from barter.domain.shared import (
    ForbiddenActionError,
    InvalidStateTransition,
    ValidationError,
)


class UnknownStatusError(ValidationError):
    """Raised when a status string is not part of the state machine."""


class SelfTradeError(ValidationError):
    """Raised when the requested product belongs to the proposer."""


class QuantityOutOfRangeError(ValidationError):
    """Raised when a quantity is outside [1, current stock]."""


class OwnershipError(ValidationError):
    """Raised when a party does not own the product it trades."""


class MissingRejectionReasonError(ValidationError):
    """Raised when a trade is rejected without a reason."""


class InvalidShippingUpdateError(ValidationError):
    """Raised when shipping metadata is incomplete or out of order."""


class NotTradePartyError(ForbiddenActionError):
    """Raised when a user acts on a trade they are not part of, or in the wrong role."""


class InvalidTradeStateError(InvalidStateTransition):
    """Raised when an operation is not allowed in the trade's current status."""
