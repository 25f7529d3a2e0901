"""Final gate: the proposed amount must clear the resolved floor.

The error carries the floor so the client can retry with a corrected amount.
"""
from src.sh_common.errors import OfferTooLowError
from src.sh_pricing.domain.policy import OfferFloor


def check_offer_floor(proposed_cents: int, floor: OfferFloor) -> None:
    if proposed_cents < floor.min_allowed_cents:
        raise OfferTooLowError(proposed_cents, floor.min_allowed_cents)
