"""Inventory use cases: tradeable products and provenance views."""
