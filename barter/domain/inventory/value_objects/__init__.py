"""Value objects for the Inventory bounded context."""

from .provenance import Provenance

__all__ = ["Provenance"]
