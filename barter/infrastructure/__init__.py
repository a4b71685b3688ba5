"""Infrastructure Layer - adapters for persistence, messaging and auth."""
