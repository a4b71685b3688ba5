"""Inventory Mapper - converts between InventoryRecord and InventoryRecordModel."""

from barter.domain.inventory import InventoryRecord, Provenance
from barter.infrastructure.persistence.sqlalchemy.models import InventoryRecordModel


class InventoryRecordMapper:
    """Mapper for InventoryRecord entity ↔ InventoryRecordModel ORM.

    Provenance is stored as two nullable columns; both are set or neither.
    """

    def to_entity(self, model: InventoryRecordModel) -> InventoryRecord:
        origin = None
        if model.origin_trade_id is not None and model.acquired_date is not None:
            origin = Provenance(
                trade_id=model.origin_trade_id,
                acquired_date=model.acquired_date,
            )

        return InventoryRecord(
            id=model.id,
            version=model.version,
            owner_id=model.owner_id,
            name=model.name,
            category=model.category,
            unit_price=model.unit_price,
            stock=model.stock,
            available_for_trade=model.available_for_trade,
            source_product_id=model.source_product_id,
            origin=origin,
            created_at=model.created_at,
        )

    def to_model(self, entity: InventoryRecord) -> InventoryRecordModel:
        return InventoryRecordModel(
            id=entity.id,
            owner_id=entity.owner_id,
            name=entity.name,
            category=entity.category,
            unit_price=entity.unit_price,
            stock=entity.stock,
            available_for_trade=entity.available_for_trade,
            source_product_id=entity.source_product_id,
            origin_trade_id=entity.origin.trade_id if entity.origin else None,
            acquired_date=entity.origin.acquired_date if entity.origin else None,
            created_at=entity.created_at,
            version=1,
        )

    def update_model_from_entity(
        self, model: InventoryRecordModel, entity: InventoryRecord
    ) -> InventoryRecordModel:
        """Update an existing model from the entity.

        Note:
            Stock is deliberately left alone; it only moves through the
            repository's conditional increments and decrements.
        """
        model.owner_id = entity.owner_id
        model.name = entity.name
        model.category = entity.category
        model.unit_price = entity.unit_price
        model.available_for_trade = entity.available_for_trade

        model.version += 1

        return model
