"""sh_negotiation REST API — offer submission, directory and status changes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_common.database import get_db_session
from src.sh_common.enums import StatusFilter
from src.sh_common.response import ApiResponse, request_response
from src.sh_gateway.auth.dependencies import get_current_actor
from src.sh_negotiation.api.dependencies import get_negotiation_service
from src.sh_negotiation.application.schemas import (
    DEFAULT_PAGE_LIMIT,
    USER_PAGE_LIMIT_MAX,
    SubmitOfferRequest,
    UpdateStatusRequest,
)
from src.sh_negotiation.application.service import NegotiationService
from src.sh_negotiation.domain.models import Actor

router = APIRouter(prefix="/negotiations", tags=["negotiations"])


@router.post("", status_code=201)
async def submit_offer(
    body: SubmitOfferRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
) -> ApiResponse:
    data = await service.submit_offer(
        db, actor, body.product_id, body.proposed_price_cents, body.message
    )
    return request_response(request, data.model_dump(), "Offer submitted")


@router.get("")
async def list_negotiations(
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
    status: StatusFilter | None = Query(None, description="Filter by offer status"),
    page: int = Query(1, ge=1, description="Page number, 1-based"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=USER_PAGE_LIMIT_MAX, description="Items per page"),
) -> ApiResponse:
    data = await service.list_negotiations(
        db, actor, status.value if status else None, page, limit
    )
    return request_response(request, data.model_dump())


@router.get("/{negotiation_id}")
async def get_negotiation(
    negotiation_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_negotiation(db, actor, negotiation_id)
    return request_response(request, data.model_dump())


@router.put("/{negotiation_id}/status")
async def update_status(
    negotiation_id: str,
    body: UpdateStatusRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    request: Request,
) -> ApiResponse:
    data = await service.update_status(db, actor, negotiation_id, body.status)
    return request_response(request, data.model_dump(), f"Negotiation {data.status}")
