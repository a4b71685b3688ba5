"""Order Mapper - converts between Order aggregate and its three tables."""

from typing import Any

from barter.domain.orders import (
    Order,
    OrderHistoryEntry,
    OrderLineItem,
    OrderStatus,
)
from barter.infrastructure.persistence.sqlalchemy.models import (
    OrderHistoryModel,
    OrderItemModel,
    OrderModel,
)


class OrderMapper:
    """Mapper for Order aggregate ↔ OrderModel (+ items, + history).

    Example:
        >>> mapper = OrderMapper()
        >>> model = mapper.to_model(order)  # order, items and history rows
        >>> order_back = mapper.to_entity(model)
    """

    def to_entity(self, model: OrderModel) -> Order:
        """Convert ORM OrderModel (with loaded items and history) → Order."""
        order = Order(
            id=model.id,
            version=model.version,
            buyer_id=model.buyer_id,
            seller_id=model.seller_id,
            items=[self.item_to_value(item) for item in model.items],
            status=OrderStatus.parse(model.status),
            total=model.total,
            rejection_reason=model.rejection_reason,
            applied_decision=model.applied_decision,
            history=[
                OrderHistoryEntry(
                    status=OrderStatus.parse(entry.status),
                    note=entry.note,
                    changed_at=entry.changed_at,
                )
                for entry in model.history
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

        order.clear_domain_events()

        return order

    def to_model(self, entity: Order) -> OrderModel:
        """Convert a new Order → OrderModel with child rows (for INSERT)."""
        return OrderModel(
            id=entity.id,
            created_at=entity.created_at,
            version=1,
            items=[
                self.item_to_model(item, position)
                for position, item in enumerate(entity.items)
            ],
            history=[self.history_to_model(entry) for entry in entity.history],
            **self.to_values(entity),
        )

    def to_values(self, entity: Order) -> dict[str, Any]:
        """Mutable columns of the ``orders`` row."""
        return {
            "buyer_id": entity.buyer_id,
            "seller_id": entity.seller_id,
            "status": entity.status.value,
            "total": entity.total,
            "rejection_reason": entity.rejection_reason,
            "applied_decision": entity.applied_decision,
            "updated_at": entity.updated_at,
        }

    @staticmethod
    def item_to_value(model: OrderItemModel) -> OrderLineItem:
        return OrderLineItem(
            product_id=model.product_id,
            name=model.name,
            unit_price=model.unit_price,
            ordered_qty=model.ordered_qty,
            confirmed_qty=model.confirmed_qty,
            confirmed=model.confirmed,
        )

    @staticmethod
    def item_to_model(item: OrderLineItem, position: int) -> OrderItemModel:
        return OrderItemModel(
            position=position,
            product_id=item.product_id,
            name=item.name,
            unit_price=item.unit_price,
            ordered_qty=item.ordered_qty,
            confirmed_qty=item.confirmed_qty,
            confirmed=item.confirmed,
        )

    @staticmethod
    def history_to_model(entry: OrderHistoryEntry) -> OrderHistoryModel:
        return OrderHistoryModel(
            status=entry.status.value,
            note=entry.note,
            changed_at=entry.changed_at,
        )
