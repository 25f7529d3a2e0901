"""Chat REST API — product conversations and the chat-side offer shortcuts.

Offer endpoints here share the admission gate and state machine with
``/negotiations``; only the request shape differs.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_common.database import get_db_session
from src.sh_common.enums import OfferAction
from src.sh_common.response import ApiResponse, request_response
from src.sh_gateway.auth.dependencies import get_current_actor
from src.sh_negotiation.api.dependencies import get_negotiation_service
from src.sh_negotiation.application.schemas import SendMessageRequest, SendOfferRequest
from src.sh_negotiation.application.service import NegotiationService
from src.sh_negotiation.domain.models import Actor

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/messages/{product_id}")
async def list_messages(
    product_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
    with_user: str | None = Query(None, description="Buyer id, for the product's vendor"),
) -> ApiResponse:
    messages = await service.list_conversation(db, actor, product_id, with_user)
    return request_response(request, [m.model_dump() for m in messages])


@router.post("/send", status_code=201)
async def send_message(
    body: SendMessageRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
) -> ApiResponse:
    data = await service.send_message(
        db, actor, body.product_id, body.message, body.recipient_id
    )
    return request_response(request, {"id": data.id}, "Message sent")


@router.post("/send-offer", status_code=201)
async def send_offer(
    body: SendOfferRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
) -> ApiResponse:
    data = await service.submit_offer(db, actor, body.product_id, body.amount_cents)
    return request_response(request, data.model_dump(), "Offer sent")


@router.post("/accept-offer/{negotiation_id}")
async def accept_offer(
    negotiation_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
) -> ApiResponse:
    data = await service.transition(db, actor, negotiation_id, OfferAction.ACCEPT.value)
    return request_response(request, data.model_dump(), "Offer accepted")


@router.post("/reject-offer/{negotiation_id}")
async def reject_offer(
    negotiation_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
) -> ApiResponse:
    data = await service.transition(db, actor, negotiation_id, OfferAction.REJECT.value)
    return request_response(request, data.model_dump(), "Offer rejected")
