"""Negotiation domain models — pure dataclasses, no SQLAlchemy dependency.

A negotiation is a chat message of type ``offer``; plain ``text`` messages
share the same record shape with ``status = none`` and no amount.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.sh_common.enums import MessageType, NegotiationStatus, UserRole


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, reduced to what authorization needs."""

    id: str
    role: str = UserRole.CUSTOMER.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_vendor(self) -> bool:
        return self.role == UserRole.VENDOR.value

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(id=str(user.id), role=str(user.role))


@dataclass
class Negotiation:
    id: str
    product_id: str
    buyer_id: str
    seller_id: str
    sender_id: str
    type: str  # text / offer
    status: str  # none / pending / accepted / rejected
    amount_cents: int | None = None
    message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.type == MessageType.OFFER.value:
            if self.amount_cents is None or self.amount_cents <= 0:
                raise ValueError("Offer amount must be a positive number of cents")
            if self.status == NegotiationStatus.NONE.value:
                raise ValueError("Offer status cannot be 'none'")
        elif self.type == MessageType.TEXT.value:
            if self.amount_cents is not None:
                raise ValueError("Text messages carry no amount")
            if self.status != NegotiationStatus.NONE.value:
                raise ValueError("Text message status must be 'none'")
        else:
            raise ValueError(f"Unknown message type: {self.type}")
        if str(self.buyer_id).lower() == str(self.seller_id).lower():
            raise ValueError("buyer_id and seller_id must differ")

    @property
    def is_offer(self) -> bool:
        return self.type == MessageType.OFFER.value

    @property
    def is_pending(self) -> bool:
        return self.is_offer and self.status == NegotiationStatus.PENDING.value

    def involves(self, user_id: str) -> bool:
        uid = str(user_id).lower()
        return uid in (str(self.buyer_id).lower(), str(self.seller_id).lower())


@dataclass
class ModerationEntry:
    id: str
    negotiation_id: str
    action: str  # approve / reject
    moderated_by: str
    reason: str | None = None
    moderated_at: datetime | None = None


@dataclass
class NegotiationPage:
    """One offset page plus the unpaged total, as returned by the repository."""

    items: list[Negotiation]
    total: int
