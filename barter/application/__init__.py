"""Application Layer - use cases (CQRS commands, queries and handlers)."""
