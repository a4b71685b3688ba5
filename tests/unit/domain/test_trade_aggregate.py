"""Unit tests for the Trade Aggregate.

PURE unit tests - business logic only, no DB.
"""

from decimal import Decimal

import pytest

from barter.domain.trading import (
    DeliveryConfirmedEvent,
    FairnessClass,
    InvalidShippingUpdateError,
    InvalidTradeStateError,
    MissingRejectionReasonError,
    NotTradePartyError,
    PartyRole,
    SelfTradeError,
    ShippingStatus,
    Trade,
    TradeAcceptedEvent,
    TradeCompletedEvent,
    TradeLine,
    TradeStatus,
    UnknownStatusError,
)

PROPOSER = 1
COUNTERPART = 2
OUTSIDER = 99


@pytest.fixture
def trade(offered_line, requested_line):
    trade = Trade.propose(
        proposer_id=PROPOSER,
        counterpart_id=COUNTERPART,
        offered=offered_line,
        requested=requested_line,
    )
    trade.id = 42
    return trade


def ship(trade: Trade) -> None:
    trade.accept(by_user_id=COUNTERPART)
    trade.update_shipping(COUNTERPART, ShippingStatus.PREPARING)
    trade.update_shipping(
        COUNTERPART, ShippingStatus.SHIPPED, tracking_number="TN-1", courier="DHL"
    )


class TestTradeProposal:
    """Tests for creating a Trade."""

    def test_propose_creates_pending_trade(self, trade):
        """Test: A new offer is PENDING with a fairness ratio."""
        assert trade.status == TradeStatus.PENDING
        assert trade.value_ratio == Decimal("1.00")
        assert trade.fairness.classification == FairnessClass.FAIR
        assert trade.shipping.status == ShippingStatus.NONE
        assert trade.confirmations.both is False

    def test_propose_with_yourself_fails(self, offered_line, requested_line):
        """Test: Proposer and counterpart must differ."""
        with pytest.raises(SelfTradeError):
            Trade.propose(PROPOSER, PROPOSER, offered_line, requested_line)

    def test_unknown_status_is_rejected(self, offered_line, requested_line):
        """Test: A stored status outside the state machine fails loudly."""
        with pytest.raises(UnknownStatusError) as exc_info:
            Trade(PROPOSER, COUNTERPART, offered_line, requested_line, status="shipped")

        assert exc_info.value.context["status"] == "shipped"

    def test_record_proposed_requires_id(self, offered_line, requested_line):
        trade = Trade.propose(PROPOSER, COUNTERPART, offered_line, requested_line)

        with pytest.raises(InvalidTradeStateError):
            trade.record_proposed()

    def test_role_of(self, trade):
        assert trade.role_of(PROPOSER) == PartyRole.PROPOSER
        assert trade.role_of(COUNTERPART) == PartyRole.COUNTERPART
        with pytest.raises(NotTradePartyError):
            trade.role_of(OUTSIDER)


class TestTradeNegotiation:
    """Tests for revising a pending offer."""

    def test_update_recomputes_ratio(self, trade):
        """Test: The ratio is computed fresh from the new quantities."""
        trade.update_quantities(
            by_user_id=PROPOSER,
            offered=trade.offered.with_quantity(3),
            requested=trade.requested.with_quantity(1),
        )

        assert trade.offered.quantity == 3
        assert trade.value_ratio == Decimal("1.50")
        assert trade.fairness.classification == FairnessClass.UNBALANCED

    def test_update_uses_new_price_snapshot(self, trade):
        trade.update_quantities(
            by_user_id=PROPOSER,
            offered=trade.offered.with_quantity(2, unit_price=Decimal("45")),
            requested=trade.requested,
        )

        assert trade.value_ratio == Decimal("0.90")

    def test_counterpart_cannot_update(self, trade):
        with pytest.raises(NotTradePartyError):
            trade.update_quantities(COUNTERPART, trade.offered, trade.requested)

    def test_cannot_update_accepted_trade(self, trade):
        trade.accept(by_user_id=COUNTERPART)

        with pytest.raises(InvalidTradeStateError):
            trade.update_quantities(PROPOSER, trade.offered, trade.requested)

    def test_cannot_swap_products(self, trade):
        other = TradeLine(product_id=999, quantity=1, unit_price=Decimal("10"))

        with pytest.raises(InvalidTradeStateError):
            trade.update_quantities(PROPOSER, other, trade.requested)


class TestTradeTransitions:
    """Tests for accept / reject / cancel."""

    def test_counterpart_accepts(self, trade):
        trade.accept(by_user_id=COUNTERPART)

        assert trade.status == TradeStatus.ACCEPTED
        assert trade.accepted_at is not None
        assert any(isinstance(e, TradeAcceptedEvent) for e in trade.get_domain_events())

    def test_proposer_cannot_accept(self, trade):
        with pytest.raises(NotTradePartyError):
            trade.accept(by_user_id=PROPOSER)

        assert trade.status == TradeStatus.PENDING

    def test_reject_requires_reason(self, trade):
        """Test: A blank reason is refused and the trade stays PENDING."""
        with pytest.raises(MissingRejectionReasonError):
            trade.reject(by_user_id=COUNTERPART, reason="   ")

        assert trade.status == TradeStatus.PENDING

    def test_reject_with_reason(self, trade):
        trade.reject(by_user_id=COUNTERPART, reason="Not interested")

        assert trade.status == TradeStatus.REJECTED
        assert trade.rejection_reason == "Not interested"
        assert trade.is_terminal is True

    def test_only_proposer_cancels(self, trade):
        with pytest.raises(NotTradePartyError):
            trade.cancel(by_user_id=COUNTERPART)

        trade.cancel(by_user_id=PROPOSER)
        assert trade.status == TradeStatus.CANCELLED

    @pytest.mark.parametrize("final", ["reject", "cancel"])
    def test_terminal_trades_are_immutable(self, trade, final):
        """Test: Nothing moves a REJECTED or CANCELLED trade."""
        if final == "reject":
            trade.reject(by_user_id=COUNTERPART, reason="No")
        else:
            trade.cancel(by_user_id=PROPOSER)

        with pytest.raises(InvalidTradeStateError):
            trade.accept(by_user_id=COUNTERPART)
        with pytest.raises(InvalidTradeStateError):
            trade.update_quantities(PROPOSER, trade.offered, trade.requested)

    def test_outsider_is_forbidden(self, trade):
        with pytest.raises(NotTradePartyError):
            trade.accept(by_user_id=OUTSIDER)


class TestShippingWorkflow:
    """Tests for the shipping sub-state."""

    def test_shipping_requires_accepted_trade(self, trade):
        with pytest.raises(InvalidTradeStateError):
            trade.update_shipping(COUNTERPART, ShippingStatus.PREPARING)

    def test_full_shipping_flow(self, trade):
        ship(trade)

        assert trade.shipping.status == ShippingStatus.SHIPPED
        assert trade.shipping.tracking_number == "TN-1"
        assert trade.shipping.courier == "DHL"
        assert trade.shipping.updated_by == COUNTERPART

    def test_either_party_may_update(self, trade):
        trade.accept(by_user_id=COUNTERPART)
        trade.update_shipping(PROPOSER, "preparing")

        assert trade.shipping.updated_by == PROPOSER

    def test_cannot_skip_preparing(self, trade):
        trade.accept(by_user_id=COUNTERPART)

        with pytest.raises(InvalidShippingUpdateError):
            trade.update_shipping(
                COUNTERPART, ShippingStatus.SHIPPED, tracking_number="TN", courier="DHL"
            )

    def test_preparing_only_once(self, trade):
        trade.accept(by_user_id=COUNTERPART)
        trade.update_shipping(COUNTERPART, ShippingStatus.PREPARING)

        with pytest.raises(InvalidShippingUpdateError):
            trade.update_shipping(COUNTERPART, ShippingStatus.PREPARING)

    @pytest.mark.parametrize(
        "tracking_number, courier",
        [(None, "DHL"), ("TN-1", None), ("  ", "DHL"), ("TN-1", "")],
    )
    def test_shipped_requires_tracking_and_courier(self, trade, tracking_number, courier):
        trade.accept(by_user_id=COUNTERPART)
        trade.update_shipping(COUNTERPART, ShippingStatus.PREPARING)

        with pytest.raises(InvalidShippingUpdateError):
            trade.update_shipping(
                COUNTERPART,
                ShippingStatus.SHIPPED,
                tracking_number=tracking_number,
                courier=courier,
            )
        assert trade.shipping.status == ShippingStatus.PREPARING

    def test_unknown_shipping_status(self, trade):
        trade.accept(by_user_id=COUNTERPART)

        with pytest.raises(UnknownStatusError):
            trade.update_shipping(COUNTERPART, "lost")


class TestDeliveryConfirmation:
    """Tests for dual confirmation and completion."""

    def test_confirmation_requires_shipped(self, trade):
        trade.accept(by_user_id=COUNTERPART)
        trade.update_shipping(COUNTERPART, ShippingStatus.PREPARING)

        with pytest.raises(InvalidTradeStateError):
            trade.confirm_delivery(by_user_id=PROPOSER)

    def test_confirmation_is_idempotent(self, trade):
        ship(trade)

        assert trade.confirm_delivery(by_user_id=PROPOSER) is True
        assert trade.confirm_delivery(by_user_id=PROPOSER) is False
        assert trade.confirmations.proposer_confirmed is True
        assert trade.confirmations.counterpart_confirmed is False

    def test_one_confirmation_is_not_enough(self, trade):
        ship(trade)
        trade.confirm_delivery(by_user_id=PROPOSER)

        assert trade.ready_for_completion is False
        with pytest.raises(InvalidTradeStateError):
            trade.complete()

    def test_complete_after_both_confirmations(self, trade):
        ship(trade)
        trade.confirm_delivery(by_user_id=PROPOSER)
        trade.confirm_delivery(by_user_id=COUNTERPART)
        trade.clear_domain_events()

        trade.complete()

        assert trade.status == TradeStatus.COMPLETED
        assert trade.completed_at is not None
        assert trade.shipping.status == ShippingStatus.DELIVERED
        events = trade.get_domain_events()
        assert len(events) == 1
        assert isinstance(events[0], TradeCompletedEvent)
        assert events[0].offered_quantity == 2

    def test_second_confirmation_reports_both(self, trade):
        ship(trade)
        trade.confirm_delivery(by_user_id=PROPOSER)
        trade.confirm_delivery(by_user_id=COUNTERPART)

        confirmations = [
            e for e in trade.get_domain_events() if isinstance(e, DeliveryConfirmedEvent)
        ]
        assert [e.both_confirmed for e in confirmations] == [False, True]

    def test_repeat_confirmation_after_completion_is_noop(self, trade):
        ship(trade)
        trade.confirm_delivery(by_user_id=PROPOSER)
        trade.confirm_delivery(by_user_id=COUNTERPART)
        trade.complete()

        assert trade.confirm_delivery(by_user_id=COUNTERPART) is False
        assert trade.status == TradeStatus.COMPLETED

    def test_completed_trade_cannot_complete_again(self, trade):
        ship(trade)
        trade.confirm_delivery(by_user_id=PROPOSER)
        trade.confirm_delivery(by_user_id=COUNTERPART)
        trade.complete()

        with pytest.raises(InvalidTradeStateError):
            trade.complete()
