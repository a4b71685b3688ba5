"""Trading use cases: negotiation, lifecycle, delivery and materialization."""
