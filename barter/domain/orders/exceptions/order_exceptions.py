"""Exceptions for the Orders bounded context."""

from barter.domain.shared import (
    ConflictError,
    ForbiddenActionError,
    ValidationError,
)


class InvalidOrderDecisionError(ValidationError):
    """Raised when a confirm/reject/partial decision is malformed."""


class NotOrderSellerError(ForbiddenActionError):
    """Raised when someone other than the seller processes an order."""


class OrderAlreadyProcessedError(ConflictError):
    """Raised when a different decision arrives for an order already processed.

    Resubmitting the decision that was applied is a no-op, not an error.
    """
