"""Fairness metric - advisory value comparison of both sides of a trade."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from barter.domain.shared import ValueObject

from .enums import FairnessClass
from .trade_line import TradeLine

RATIO_PRECISION = Decimal("0.01")

FAIR_BAND = (Decimal("0.9"), Decimal("1.1"))
REASONABLE_BAND = (Decimal("0.8"), Decimal("1.2"))


@dataclass(frozen=True)
class FairnessMetric(ValueObject):
    """Relative value of what is offered versus what is requested.

    Never blocks a transition. The ratio is always offered/requested in the
    trade's own orientation, computed with Decimal arithmetic, so proposer and
    counterpart see exactly the same number.

    Example:
        >>> metric = FairnessMetric.compute(
        ...     TradeLine(product_id=1, quantity=2, unit_price=Decimal("50")),
        ...     TradeLine(product_id=2, quantity=1, unit_price=Decimal("100")),
        ... )
        >>> metric.ratio, metric.classification
        (Decimal('1.00'), <FairnessClass.FAIR: 'Fair'>)
    """

    offered_value: Decimal
    requested_value: Decimal
    ratio: Decimal | None
    classification: FairnessClass

    @classmethod
    def compute(cls, offered: TradeLine, requested: TradeLine) -> "FairnessMetric":
        offered_value = offered.value
        requested_value = requested.value

        if requested_value == 0:
            return cls(
                offered_value=offered_value,
                requested_value=requested_value,
                ratio=None,
                classification=FairnessClass.UNDETERMINED,
            )

        ratio = (offered_value / requested_value).quantize(
            RATIO_PRECISION, rounding=ROUND_HALF_UP
        )
        return cls(
            offered_value=offered_value,
            requested_value=requested_value,
            ratio=ratio,
            classification=classify_ratio(ratio),
        )

    @property
    def value_difference(self) -> Decimal:
        return abs(self.offered_value - self.requested_value)


def classify_ratio(ratio: Decimal) -> FairnessClass:
    """Fair inside [0.9, 1.1], Reasonable inside [0.8, 1.2], else Unbalanced."""
    if FAIR_BAND[0] <= ratio <= FAIR_BAND[1]:
        return FairnessClass.FAIR
    if REASONABLE_BAND[0] <= ratio <= REASONABLE_BAND[1]:
        return FairnessClass.REASONABLE
    return FairnessClass.UNBALANCED
