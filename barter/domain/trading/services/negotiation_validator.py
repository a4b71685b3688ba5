"""NegotiationValidator - Domain Service guarding barter offers.

Coordinates Trade and InventoryRecord aggregates: an offer is only valid
against the owners and stock levels stored right now, so proposals, updates
and acceptances all go through the same checks.
"""

import logging
from dataclasses import dataclass

from barter.domain.inventory import InventoryRecord, InventoryRepository
from barter.domain.shared import AggregateNotFound

from ..entities import Trade
from ..exceptions.trading_exceptions import (
    OwnershipError,
    QuantityOutOfRangeError,
    SelfTradeError,
)
from ..value_objects import TradeLine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatedOffer:
    """Both trade lines with fresh price snapshots, plus the counterpart."""

    counterpart_id: int
    offered: TradeLine
    requested: TradeLine


class NegotiationValidator:
    """Ownership, quantity and stock checks for offers.

    Rules:
    - The requested product must not belong to the proposer (no self-trade)
    - The proposer must own the offered product
    - A declared counterpart must own the requested product
    - ``1 <= quantity <= current stock`` on both sides

    Example:
        >>> validator = NegotiationValidator(uow.inventory)
        >>> offer = await validator.validate_proposal(
        ...     proposer_id=1,
        ...     offered_product_id=10,
        ...     requested_product_id=20,
        ...     qty_offered=2,
        ...     qty_requested=1,
        ... )
        >>> trade = Trade.propose(1, offer.counterpart_id, offer.offered, offer.requested)
    """

    def __init__(self, inventory: InventoryRepository) -> None:
        """Initialize NegotiationValidator.

        Args:
            inventory: InventoryRepository used to read owners and stock.
        """
        self._inventory = inventory

    async def validate_proposal(
        self,
        proposer_id: int,
        offered_product_id: int,
        requested_product_id: int,
        qty_offered: int,
        qty_requested: int,
        counterpart_id: int | None = None,
    ) -> ValidatedOffer:
        """Validate a new offer.

        Args:
            proposer_id: Caller making the offer.
            offered_product_id: Product the proposer gives.
            requested_product_id: Product the proposer wants.
            qty_offered: Units given.
            qty_requested: Units wanted.
            counterpart_id: Owner the caller believes holds the requested
                product, if the caller declared one.

        Returns:
            ValidatedOffer with unit price snapshots.

        Raises:
            AggregateNotFound: A product does not exist.
            SelfTradeError: Requested product belongs to the proposer.
            OwnershipError: Proposer does not own the offered product, or the
                declared counterpart does not own the requested one.
            QuantityOutOfRangeError: A quantity is outside ``[1, stock]``.
        """
        offered, requested = await self._load_pair(offered_product_id, requested_product_id)

        if requested.owner_id == proposer_id:
            raise SelfTradeError(
                "Cannot request your own product",
                proposer_id=proposer_id,
                product_id=requested.id,
            )

        if offered.owner_id != proposer_id:
            raise OwnershipError(
                "You can only offer products you own",
                proposer_id=proposer_id,
                product_id=offered.id,
            )

        if counterpart_id is not None and requested.owner_id != counterpart_id:
            raise OwnershipError(
                "Requested product does not belong to the selected user",
                counterpart_id=counterpart_id,
                product_id=requested.id,
            )

        self._check_quantity(offered, qty_offered, side="offered")
        self._check_quantity(requested, qty_requested, side="requested")

        return ValidatedOffer(
            counterpart_id=requested.owner_id,
            offered=TradeLine(offered.id, qty_offered, offered.unit_price),
            requested=TradeLine(requested.id, qty_requested, requested.unit_price),
        )

    async def validate_update(
        self,
        trade: Trade,
        qty_offered: int,
        qty_requested: int,
    ) -> ValidatedOffer:
        """Validate revised quantities of a pending trade.

        Checks against current stock (it may have dropped since the proposal)
        and refreshes the price snapshots.
        """
        offered, requested = await self._load_pair(
            trade.offered.product_id, trade.requested.product_id
        )
        self._check_owners(trade, offered, requested)

        self._check_quantity(offered, qty_offered, side="offered")
        self._check_quantity(requested, qty_requested, side="requested")

        return ValidatedOffer(
            counterpart_id=trade.counterpart_id,
            offered=trade.offered.with_quantity(qty_offered, offered.unit_price),
            requested=trade.requested.with_quantity(qty_requested, requested.unit_price),
        )

    async def ensure_still_satisfiable(self, trade: Trade) -> None:
        """Re-check a pending trade against stock right before acceptance.

        Raises:
            OwnershipError: A product changed hands since the proposal.
            QuantityOutOfRangeError: Stock dropped below a traded quantity.
        """
        offered, requested = await self._load_pair(
            trade.offered.product_id, trade.requested.product_id
        )
        self._check_owners(trade, offered, requested)

        self._check_quantity(offered, trade.offered.quantity, side="offered")
        self._check_quantity(requested, trade.requested.quantity, side="requested")

    async def _load_pair(
        self, offered_product_id: int, requested_product_id: int
    ) -> tuple[InventoryRecord, InventoryRecord]:
        records = await self._inventory.get_many([offered_product_id, requested_product_id])

        for product_id in (offered_product_id, requested_product_id):
            if product_id not in records:
                raise AggregateNotFound("Product not found", product_id=product_id)

        return records[offered_product_id], records[requested_product_id]

    def _check_owners(
        self, trade: Trade, offered: InventoryRecord, requested: InventoryRecord
    ) -> None:
        if offered.owner_id != trade.proposer_id or requested.owner_id != trade.counterpart_id:
            raise OwnershipError(
                "Traded products changed owner since the proposal",
                trade_id=trade.id,
            )

    def _check_quantity(self, record: InventoryRecord, quantity: int, side: str) -> None:
        if not record.has_stock(quantity):
            logger.info(
                "negotiation.quantity_rejected",
                extra={
                    "product_id": record.id,
                    "side": side,
                    "quantity": quantity,
                    "stock": record.stock,
                },
            )
            raise QuantityOutOfRangeError(
                f"Quantity {side} must be between 1 and the available stock",
                product_id=record.id,
                quantity=quantity,
                available=record.stock,
            )
