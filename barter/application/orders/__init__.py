"""Order use cases: placement and seller fulfillment."""
