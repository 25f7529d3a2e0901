# src/sh_admin/application/schemas.py
from typing import Literal

from pydantic import BaseModel, Field

from src.sh_negotiation.application.schemas import NegotiationResponse


class ModerateRequest(BaseModel):
    action: Literal["approve", "reject"]
    reason: str | None = Field(None, min_length=1, max_length=500)


class ModerationResponse(BaseModel):
    negotiation: NegotiationResponse
    moderation_id: str
    action: str
    reason: str | None
    moderated_by: str
