"""Base domain exceptions.

Domain exceptions represent violated business rules. They belong to the
domain layer and know nothing about HTTP; the presentation layer maps each
family to a status code.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain errors.

    Example:
        >>> raise DomainException("Trade cannot be accepted", trade_id=42)
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize domain exception.

        Args:
            message: Human-readable error message.
            **context: Additional context (trade_id, product_id, etc).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ValidationError(DomainException):
    """Input violates a business rule (bad quantity, stock, ownership, ...).

    Surfaced to the caller immediately and never retried automatically.
    """


class ForbiddenActionError(DomainException):
    """Caller is not allowed to perform the action on this aggregate."""


class AggregateNotFound(DomainException):
    """Aggregate does not exist.

    Example:
        >>> trade = await uow.trades.get_by_id(123)
        >>> if trade is None:
        ...     raise AggregateNotFound("Trade not found", trade_id=123)
    """


class InvalidStateTransition(DomainException):
    """Transition is not allowed from the aggregate's current state.

    Example:
        >>> # rejected -> accepted is invalid
        >>> raise InvalidStateTransition(
        ...     "Cannot accept trade",
        ...     current_status="rejected",
        ...     expected_status="pending",
        ... )
    """


class ConflictError(DomainException):
    """Compare-and-set failed: the stored state moved since it was read.

    The caller should re-fetch the aggregate instead of retrying blindly.

    Example:
        >>> raise ConflictError(
        ...     "Trade was modified by another transaction",
        ...     trade_id=42,
        ...     expected_status="pending",
        ...     expected_version=3,
        ... )
    """


class TransactionError(DomainException):
    """A multi-step operation failed and was rolled back as a whole."""
