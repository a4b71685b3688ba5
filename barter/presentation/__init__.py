"""Presentation Layer - HTTP API and background workers."""
