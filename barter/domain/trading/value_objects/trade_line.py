"""TradeLine value object - one side of a barter offer."""

from dataclasses import dataclass
from decimal import Decimal

from barter.domain.shared import ValueObject, validate_value_object


@dataclass(frozen=True)
class TradeLine(ValueObject):
    """A product, a quantity and the unit price captured when the line was set.

    The unit price is a snapshot: later price changes in the catalog do not
    alter the value of a trade that is already on the table.

    Example:
        >>> line = TradeLine(product_id=10, quantity=2, unit_price=Decimal("50"))
        >>> line.value
        Decimal('100')
    """

    product_id: int
    quantity: int
    unit_price: Decimal

    def __post_init__(self) -> None:
        validate_value_object(self.quantity >= 1, "quantity must be at least 1")
        validate_value_object(self.unit_price >= 0, "unit_price must be non-negative")

    @property
    def value(self) -> Decimal:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int, unit_price: Decimal | None = None) -> "TradeLine":
        """Copy of this line with a new quantity (and optionally a fresh price snapshot)."""
        return TradeLine(
            product_id=self.product_id,
            quantity=quantity,
            unit_price=self.unit_price if unit_price is None else unit_price,
        )
