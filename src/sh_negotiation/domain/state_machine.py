"""Offer lifecycle state machine.

    pending ──accept──► accepted   (terminal)
       │
       └────reject──► rejected   (terminal)

Only the seller on the record or an admin may act. Authorization is checked
before state so a buyer is refused even on an already-decided offer.
Terminal states have no outgoing edges; a repeated transition fails rather
than silently succeeding.
"""

from src.sh_common.enums import NegotiationStatus, OfferAction
from src.sh_common.errors import (
    InvalidStatusTransitionError,
    NegotiationForbiddenError,
    OfferNotPendingError,
)
from src.sh_negotiation.domain.models import Actor, Negotiation

TRANSITIONS: dict[tuple[str, str], str] = {
    (NegotiationStatus.PENDING.value, OfferAction.ACCEPT.value): NegotiationStatus.ACCEPTED.value,
    (NegotiationStatus.PENDING.value, OfferAction.REJECT.value): NegotiationStatus.REJECTED.value,
}

TERMINAL_STATES: frozenset[str] = frozenset(
    {NegotiationStatus.ACCEPTED.value, NegotiationStatus.REJECTED.value}
)

_ACTION_FOR_STATUS: dict[str, str] = {
    NegotiationStatus.ACCEPTED.value: OfferAction.ACCEPT.value,
    NegotiationStatus.REJECTED.value: OfferAction.REJECT.value,
}


def can_decide(actor: Actor, negotiation: Negotiation) -> bool:
    return actor.is_admin or str(actor.id).lower() == str(negotiation.seller_id).lower()


def next_status(negotiation: Negotiation, actor: Actor, action: str) -> str:
    """Validate a transition and return the target status without mutating anything.

    Raises:
        NegotiationForbiddenError: actor is neither admin nor the seller.
        OfferNotPendingError: record is not an offer, or not pending.
    """
    if not can_decide(actor, negotiation):
        raise NegotiationForbiddenError(negotiation.id)
    if not negotiation.is_offer:
        raise OfferNotPendingError(negotiation.id, negotiation.status)
    target = TRANSITIONS.get((negotiation.status, action))
    if target is None:
        raise OfferNotPendingError(negotiation.id, negotiation.status)
    return target


def action_for_status(status: str) -> str:
    """Map a requested target status (``PUT …/status``) onto an action."""
    action = _ACTION_FOR_STATUS.get(status)
    if action is None:
        raise InvalidStatusTransitionError(status)
    return action
