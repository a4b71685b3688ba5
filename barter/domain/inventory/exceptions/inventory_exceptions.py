"""Exceptions for the Inventory bounded context."""

from barter.domain.shared import ForbiddenActionError, ValidationError


class InsufficientStockError(ValidationError):
    """Raised when a product does not hold enough stock for a decrement.

    Example:
        >>> raise InsufficientStockError(
        ...     "Not enough stock",
        ...     product_id=10,
        ...     available=2,
        ...     required=5,
        ... )
    """


class NotProductOwnerError(ForbiddenActionError):
    """Raised when a user manages inventory that belongs to someone else."""
