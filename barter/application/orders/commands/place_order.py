"""PlaceOrder Command - buy products for money (payment handled elsewhere)."""

from dataclasses import dataclass

from barter.application.shared import Command


@dataclass(frozen=True)
class OrderItemRequest:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class PlaceOrderCommand(Command):
    """Command to place an order.

    Items of different sellers are split into one order per seller.

    Example:
        >>> command = PlaceOrderCommand(
        ...     buyer_id=3,
        ...     items=(OrderItemRequest(product_id=10, quantity=2),),
        ... )
    """

    buyer_id: int
    items: tuple[OrderItemRequest, ...]
