# src/sh_negotiation/application/schemas.py
"""Pydantic request/response schemas for sh_negotiation.

Pagination is offset-based (page/limit) because clients render page
numbers and a total count; sort order is fixed newest-first.
"""
from math import ceil
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from src.sh_common.money import cents_to_display
from src.sh_negotiation.domain.models import Negotiation

USER_PAGE_LIMIT_MAX = 50
ADMIN_PAGE_LIMIT_MAX = 100
DEFAULT_PAGE_LIMIT = 20

StatusFilterValue = Literal["pending", "accepted", "rejected", "completed"]


def _strip_required(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("must not be blank")
    return v.strip()


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class SubmitOfferRequest(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    proposed_price_cents: int = Field(..., gt=0)
    message: str | None = Field(None, min_length=1, max_length=500)


class SendOfferRequest(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    amount_cents: int = Field(..., gt=0)


class SendMessageRequest(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    message: str = Field(..., min_length=1, max_length=500)
    recipient_id: str | None = Field(
        None, description="Required when the product's vendor replies to a buyer"
    )

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        return _strip_required(v)


class UpdateStatusRequest(BaseModel):
    status: StatusFilterValue


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class NegotiationResponse(BaseModel):
    id: str
    product_id: str
    buyer_id: str
    seller_id: str
    sender_id: str
    type: str
    status: str
    amount_cents: int | None
    amount_display: str | None
    message: str | None
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, n: Negotiation) -> "NegotiationResponse":
        return cls(
            id=n.id,
            product_id=n.product_id,
            buyer_id=n.buyer_id,
            seller_id=n.seller_id,
            sender_id=n.sender_id,
            type=n.type,
            status=n.status,
            amount_cents=n.amount_cents,
            amount_display=(
                cents_to_display(n.amount_cents) if n.amount_cents is not None else None
            ),
            message=n.message,
            created_at=n.created_at.isoformat() if n.created_at else None,
            updated_at=n.updated_at.isoformat() if n.updated_at else None,
        )


class PaginationResponse(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int, returned: int) -> "PaginationResponse":
        offset = (page - 1) * limit
        return cls(
            current_page=page,
            total_pages=ceil(total / limit) if limit else 0,
            total_count=total,
            has_next=offset + returned < total,
            has_prev=page > 1,
        )


class NegotiationListResponse(BaseModel):
    negotiations: list[NegotiationResponse]
    pagination: PaginationResponse


class ChatMessageResponse(BaseModel):
    """Conversation view: one entry per message, oldest first."""

    id: str
    product_id: str
    sender_id: str
    message: str | None
    type: str
    amount_cents: int | None
    status: str
    timestamp: str | None

    @classmethod
    def from_domain(cls, n: Negotiation) -> "ChatMessageResponse":
        return cls(
            id=n.id,
            product_id=n.product_id,
            sender_id=n.sender_id,
            message=n.message,
            type=n.type,
            amount_cents=n.amount_cents,
            status=n.status,
            timestamp=n.created_at.isoformat() if n.created_at else None,
        )
