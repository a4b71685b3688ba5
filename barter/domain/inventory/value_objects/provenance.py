"""Provenance value object - where a traded inventory record came from."""

from dataclasses import dataclass
from datetime import datetime

from barter.domain.shared import ValueObject, validate_value_object


@dataclass(frozen=True)
class Provenance(ValueObject):
    """Origin tag of inventory acquired through a completed trade.

    Originally listed products carry no provenance (``origin is None``).
    """

    trade_id: int
    acquired_date: datetime

    def __post_init__(self) -> None:
        validate_value_object(self.trade_id > 0, "trade_id must be positive")
