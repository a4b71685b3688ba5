"""Entities for the Trading bounded context."""

from .trade import Trade

__all__ = ["Trade"]
