"""Shared Kernel - base classes for the whole domain layer.

- Entity: object with identity
- ValueObject: immutable object compared by value
- AggregateRoot: root entity of an aggregate, collects domain events
- DomainEvent: something that happened in the domain
- DomainException family: violated business rules
"""

from .aggregate_root import AggregateRoot
from .domain_event import DomainEvent
from .entity import Entity
from .exceptions import (
    AggregateNotFound,
    ConflictError,
    DomainException,
    ForbiddenActionError,
    InvalidStateTransition,
    TransactionError,
    ValidationError,
)
from .value_object import ValueObject, validate_value_object

__all__ = [
    # Base classes
    "Entity",
    "ValueObject",
    "AggregateRoot",
    "DomainEvent",
    # Utilities
    "validate_value_object",
    # Exceptions
    "DomainException",
    "ValidationError",
    "ForbiddenActionError",
    "AggregateNotFound",
    "InvalidStateTransition",
    "ConflictError",
    "TransactionError",
]
