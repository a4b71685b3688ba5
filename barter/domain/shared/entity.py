"""Base Entity class for domain model.

Entity - an object with a unique identity. Two entities with identical
attributes but different IDs are different objects.
"""

from abc import ABC


class Entity(ABC):
    """Base class for all domain entities.

    Entities are compared by ID, not by attribute values.

    Example:
        >>> record1 = InventoryRecord(id=1, owner_id=7, ...)
        >>> record2 = InventoryRecord(id=1, owner_id=8, ...)
        >>> record1 == record2  # True (same ID)
    """

    def __init__(self, id: int | None = None) -> None:
        """Initialize entity with optional ID.

        Args:
            id: Unique identifier. None for new entities (not yet persisted).
        """
        self._id = id

    @property
    def id(self) -> int | None:
        """Get entity ID."""
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        """Assign the ID generated by the database on first save."""
        if self._id is not None and self._id != value:
            raise ValueError(f"{self.__class__.__name__} already has id {self._id}")
        self._id = value

    def __eq__(self, other: object) -> bool:
        """Entities are compared by ID, not by attributes."""
        if not isinstance(other, Entity):
            return False

        # Two unsaved entities are only equal to themselves
        if self._id is None and other._id is None:
            return self is other

        return type(self) is type(other) and self._id == other._id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets/dicts."""
        if self._id is None:
            return hash(id(self))
        return hash((type(self).__name__, self._id))

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"{self.__class__.__name__}(id={self._id})"
