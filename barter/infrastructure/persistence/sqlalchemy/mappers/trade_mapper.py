"""Trade Mapper - converts between Trade entity and TradeModel ORM."""

from typing import Any

from barter.domain.trading.entities import Trade
from barter.domain.trading.value_objects import (
    DeliveryConfirmations,
    ShippingInfo,
    ShippingStatus,
    TradeLine,
    TradeStatus,
)
from barter.infrastructure.persistence.sqlalchemy.models import TradeModel


class TradeMapper:
    """Mapper for Trade entity ↔ TradeModel ORM.

    Responsibilities:
    - Convert domain Trade entity → ORM TradeModel (to_model)
    - Convert ORM TradeModel → domain Trade entity (to_entity)
    - Produce the column values of a compare-and-set UPDATE (to_values)
    - Flatten / rebuild TradeLine, ShippingInfo and DeliveryConfirmations

    Example:
        >>> mapper = TradeMapper()
        >>> trade = Trade.propose(...)
        >>> model = mapper.to_model(trade)  # Domain → ORM
        >>> trade_back = mapper.to_entity(model)  # ORM → Domain
    """

    def to_entity(self, model: TradeModel) -> Trade:
        """Convert ORM TradeModel → Domain Trade entity.

        Args:
            model: SQLAlchemy TradeModel.

        Returns:
            Domain Trade entity.

        Raises:
            UnknownStatusError: Stored status is not part of the state machine.
        """
        trade = Trade(
            id=model.id,
            version=model.version,
            proposer_id=model.proposer_id,
            counterpart_id=model.counterpart_id,
            offered=TradeLine(
                product_id=model.offered_product_id,
                quantity=model.offered_quantity,
                unit_price=model.offered_unit_price,
            ),
            requested=TradeLine(
                product_id=model.requested_product_id,
                quantity=model.requested_quantity,
                unit_price=model.requested_unit_price,
            ),
            status=TradeStatus.parse(model.status),
            shipping=ShippingInfo(
                status=ShippingStatus.parse(model.shipping_status),
                tracking_number=model.tracking_number,
                courier=model.courier,
                notes=model.shipping_notes,
                updated_by=model.shipping_updated_by,
                updated_at=model.shipping_updated_at,
            ),
            confirmations=DeliveryConfirmations(
                proposer_confirmed=model.proposer_confirmed,
                counterpart_confirmed=model.counterpart_confirmed,
            ),
            created_at=model.created_at,
            accepted_at=model.accepted_at,
            completed_at=model.completed_at,
            rejection_reason=model.rejection_reason,
            notes=model.notes,
        )

        # Do not replay events loaded from the DB
        trade.clear_domain_events()

        return trade

    def to_model(self, entity: Trade) -> TradeModel:
        """Convert Domain Trade entity → ORM TradeModel (for INSERT).

        Args:
            entity: Domain Trade entity.

        Returns:
            SQLAlchemy TradeModel with version 1.
        """
        return TradeModel(
            id=entity.id,
            created_at=entity.created_at,
            version=1,
            **self.to_values(entity),
        )

    def to_values(self, entity: Trade) -> dict[str, Any]:
        """Mutable columns of a trade, as used by the compare-and-set UPDATE.

        Note:
            ``id``, ``created_at`` and ``version`` are left to the caller.
        """
        return {
            "proposer_id": entity.proposer_id,
            "counterpart_id": entity.counterpart_id,
            "offered_product_id": entity.offered.product_id,
            "offered_quantity": entity.offered.quantity,
            "offered_unit_price": entity.offered.unit_price,
            "requested_product_id": entity.requested.product_id,
            "requested_quantity": entity.requested.quantity,
            "requested_unit_price": entity.requested.unit_price,
            "value_ratio": entity.value_ratio,
            "status": entity.status.value,  # Enum → string
            "shipping_status": entity.shipping.status.value,
            "tracking_number": entity.shipping.tracking_number,
            "courier": entity.shipping.courier,
            "shipping_notes": entity.shipping.notes,
            "shipping_updated_by": entity.shipping.updated_by,
            "shipping_updated_at": entity.shipping.updated_at,
            "proposer_confirmed": entity.confirmations.proposer_confirmed,
            "counterpart_confirmed": entity.confirmations.counterpart_confirmed,
            "accepted_at": entity.accepted_at,
            "completed_at": entity.completed_at,
            "rejection_reason": entity.rejection_reason,
            "notes": entity.notes,
        }
