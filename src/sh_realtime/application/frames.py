"""Client → server WebSocket frames.

Clients send ``{"type": "<event>", "data": {...}}``; ``data`` is validated
against the model registered for the event type.
"""

from pydantic import BaseModel, Field


class ProductRoomFrame(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)


class ChatFrame(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    message: str = Field(..., min_length=1, max_length=500)
    type: str = "text"
    amount_cents: int | None = Field(None, gt=0)


class OfferUpdateFrame(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    offer_id: str
    status: str
    message: str | None = None


class PlaceBidFrame(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    bid_amount_cents: int = Field(..., gt=0)
    bidder_name: str | None = None
