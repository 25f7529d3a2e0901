"""A vendor may not open a negotiation on their own listing.

IDs are compared case-insensitively since UUIDs can arrive in either case.
"""
from src.sh_common.errors import SelfNegotiationError


def is_self_negotiation(buyer_id: str, vendor_id: str) -> bool:
    return str(buyer_id).lower() == str(vendor_id).lower()


def check_not_self_negotiation(buyer_id: str, vendor_id: str) -> None:
    if is_self_negotiation(buyer_id, vendor_id):
        raise SelfNegotiationError()
