"""Base ValueObject class for domain model.

ValueObject - an immutable object compared by the values of its attributes,
not by identity.
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class ValueObject(ABC):
    """Base class for all domain value objects.

    - **Immutable**: cannot change after creation (frozen=True)
    - **Equality by value**: two VOs with the same fields are equal
    - **Replaceable**: to "change" a VO, build a new one

    Example:
        >>> @dataclass(frozen=True)
        ... class ShippingInfo(ValueObject):
        ...     status: ShippingStatus
        ...     tracking_number: str | None = None
        ...
        ...     def __post_init__(self):
        ...         validate_value_object(
        ...             self.status != ShippingStatus.SHIPPED or bool(self.tracking_number),
        ...             "tracking_number is required once shipped",
        ...         )
    """

    def __post_init__(self) -> None:
        """Hook for validation after initialization.

        Raises:
            ValueError: If validation fails.
        """
        pass


def validate_value_object(condition: bool, message: str) -> None:
    """Helper for validation in value objects.

    Raises:
        ValueError: If condition is False.
    """
    if not condition:
        raise ValueError(message)
