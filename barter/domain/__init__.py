"""Domain Layer - Pure Business Logic.

This layer contains:
- Bounded Contexts (Trading, Inventory, Orders)
- Aggregate Roots (Trade, InventoryRecord, Order)
- Value Objects (immutable domain primitives)
- Domain Services (NegotiationValidator)
- Domain Events (for decoupling)
- Repository Interfaces (ports)

Key Principles:
- Zero dependencies on infrastructure
- Pure business logic only
- Rich domain models (not anemic)

Bounded Contexts:
- trading: Barter negotiation, lifecycle, shipping and delivery confirmation
- inventory: Product holdings and trade provenance
- orders: Monetary orders and their fulfillment
- shared: Common base classes
"""

# Shared kernel
from .shared import AggregateRoot, DomainEvent, DomainException

__all__ = [
    "AggregateRoot",
    "DomainEvent",
    "DomainException",
]
