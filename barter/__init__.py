"""Barter trade lifecycle and order fulfillment engine."""

__version__ = "2.0.0"
