# src/sh_admin/api/router.py
"""Admin REST API — every route requires the admin role."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_admin.application.schemas import ModerateRequest
from src.sh_admin.application.service import AdminNegotiationService
from src.sh_common.database import get_db_session
from src.sh_common.enums import StatusFilter
from src.sh_common.response import ApiResponse, request_response
from src.sh_gateway.auth.dependencies import require_admin
from src.sh_negotiation.api.dependencies import get_negotiation_service
from src.sh_negotiation.application.schemas import ADMIN_PAGE_LIMIT_MAX, DEFAULT_PAGE_LIMIT
from src.sh_negotiation.application.service import NegotiationService
from src.sh_negotiation.domain.models import Actor

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service(
    negotiations: Annotated[NegotiationService, Depends(get_negotiation_service)],
) -> AdminNegotiationService:
    return AdminNegotiationService(negotiations=negotiations)


@router.get("/negotiations")
async def list_offers(
    admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminNegotiationService, Depends(get_admin_service)],
    request: Request,
    status: StatusFilter | None = Query(None, description="Filter by offer status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=ADMIN_PAGE_LIMIT_MAX),
) -> ApiResponse:
    data = await service.list_offers(db, status.value if status else None, page, limit)
    return request_response(request, data.model_dump())


@router.put("/negotiations/{negotiation_id}/moderate")
async def moderate(
    negotiation_id: str,
    body: ModerateRequest,
    admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminNegotiationService, Depends(get_admin_service)],
    request: Request,
) -> ApiResponse:
    data = await service.moderate(db, admin, negotiation_id, body.action, body.reason)
    return request_response(request, data.model_dump(), f"Negotiation {data.negotiation.status}")
