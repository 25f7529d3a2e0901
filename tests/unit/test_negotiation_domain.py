"""Tests for Negotiation record invariants and the offer state machine."""

import pytest

from src.sh_common.errors import (
    InvalidStatusTransitionError,
    NegotiationForbiddenError,
    OfferNotPendingError,
)
from src.sh_negotiation.domain.models import Actor, Negotiation
from src.sh_negotiation.domain.state_machine import (
    TERMINAL_STATES,
    action_for_status,
    can_decide,
    next_status,
)

BUYER = Actor(id="buyer-1", role="customer")
SELLER = Actor(id="seller-1", role="vendor")
OTHER_VENDOR = Actor(id="seller-2", role="vendor")
ADMIN = Actor(id="admin-1", role="admin")


def _offer(status: str = "pending", **kwargs: object) -> Negotiation:
    fields: dict[str, object] = {
        "id": "n-1",
        "product_id": "p-1",
        "buyer_id": BUYER.id,
        "seller_id": SELLER.id,
        "sender_id": BUYER.id,
        "type": "offer",
        "status": status,
        "amount_cents": 250000,
    }
    fields.update(kwargs)
    return Negotiation(**fields)  # type: ignore[arg-type]


class TestNegotiationInvariants:
    def test_offer_requires_positive_amount(self) -> None:
        with pytest.raises(ValueError):
            _offer(amount_cents=0)

    def test_offer_cannot_have_status_none(self) -> None:
        with pytest.raises(ValueError):
            _offer(status="none")

    def test_text_message_has_no_amount(self) -> None:
        with pytest.raises(ValueError):
            _offer(type="text", status="none", amount_cents=100)

    def test_text_message_status_none(self) -> None:
        msg = _offer(type="text", status="none", amount_cents=None, message="hi")
        assert not msg.is_offer
        assert not msg.is_pending

    def test_buyer_and_seller_must_differ(self) -> None:
        with pytest.raises(ValueError):
            _offer(seller_id="BUYER-1")

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            _offer(type="bid")

    def test_involves_parties_only(self) -> None:
        offer = _offer()
        assert offer.involves("buyer-1")
        assert offer.involves("SELLER-1")
        assert not offer.involves("someone-else")


class TestStateMachine:
    def test_seller_accepts_pending(self) -> None:
        assert next_status(_offer(), SELLER, "accept") == "accepted"

    def test_seller_rejects_pending(self) -> None:
        assert next_status(_offer(), SELLER, "reject") == "rejected"

    def test_admin_may_decide(self) -> None:
        assert can_decide(ADMIN, _offer())
        assert next_status(_offer(), ADMIN, "reject") == "rejected"

    @pytest.mark.parametrize("status", ["pending", "accepted", "rejected"])
    def test_buyer_always_forbidden(self, status: str) -> None:
        """Authorization is checked before state, so the buyer never sees a state error."""
        with pytest.raises(NegotiationForbiddenError):
            next_status(_offer(status=status), BUYER, "accept")

    def test_other_vendor_forbidden(self) -> None:
        with pytest.raises(NegotiationForbiddenError):
            next_status(_offer(), OTHER_VENDOR, "accept")

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATES))
    @pytest.mark.parametrize("action", ["accept", "reject"])
    def test_terminal_states_are_final(self, status: str, action: str) -> None:
        with pytest.raises(OfferNotPendingError):
            next_status(_offer(status=status), SELLER, action)

    def test_text_message_cannot_transition(self) -> None:
        msg = _offer(type="text", status="none", amount_cents=None)
        with pytest.raises(OfferNotPendingError):
            next_status(msg, SELLER, "accept")

    def test_unknown_action_is_not_a_transition(self) -> None:
        with pytest.raises(OfferNotPendingError):
            next_status(_offer(), SELLER, "complete")


class TestActionForStatus:
    def test_accepted_maps_to_accept(self) -> None:
        assert action_for_status("accepted") == "accept"

    def test_rejected_maps_to_reject(self) -> None:
        assert action_for_status("rejected") == "reject"

    @pytest.mark.parametrize("status", ["pending", "completed", "none"])
    def test_other_statuses_rejected(self, status: str) -> None:
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            action_for_status(status)
        assert exc_info.value.http_status == 400
