# src/sh_admin/application/service.py
"""Admin negotiation service — platform-wide offer directory and moderation.

Moderation runs through the same state machine as a seller decision, with
the admin as actor, so a decided offer cannot be flipped afterwards.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_admin.application.schemas import ModerationResponse
from src.sh_common.enums import ModerationAction, OfferAction
from src.sh_common.id_generator import generate_id
from src.sh_negotiation.application.schemas import (
    NegotiationListResponse,
    NegotiationResponse,
)
from src.sh_negotiation.application.service import NegotiationService
from src.sh_negotiation.domain.models import Actor, ModerationEntry
from src.sh_negotiation.domain.repository import NegotiationRepositoryProtocol
from src.sh_negotiation.infrastructure.persistence import NegotiationRepository

logger = logging.getLogger("sh.admin")

_ACTION_FOR_MODERATION: dict[str, str] = {
    ModerationAction.APPROVE.value: OfferAction.ACCEPT.value,
    ModerationAction.REJECT.value: OfferAction.REJECT.value,
}


class AdminNegotiationService:
    def __init__(
        self,
        negotiations: NegotiationService | None = None,
        repo: NegotiationRepositoryProtocol | None = None,
    ) -> None:
        self._repo: NegotiationRepositoryProtocol = repo or NegotiationRepository()
        self._negotiations = negotiations or NegotiationService(repo=self._repo)

    async def list_offers(
        self, db: AsyncSession, status: str | None, page: int, limit: int
    ) -> NegotiationListResponse:
        return await self._negotiations.list_offers(db, status, page, limit)

    async def moderate(
        self,
        db: AsyncSession,
        admin: Actor,
        negotiation_id: str,
        action: str,
        reason: str | None = None,
    ) -> ModerationResponse:
        entry = ModerationEntry(
            id=generate_id(),
            negotiation_id=negotiation_id,
            action=action,
            moderated_by=admin.id,
            reason=reason,
        )
        try:
            updated = await self._negotiations.decide(
                db, admin, negotiation_id, _ACTION_FOR_MODERATION[action]
            )
            await self._repo.add_moderation(entry, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.warning(
            "Offer %s moderated (%s) by admin %s: %s",
            negotiation_id, action, admin.id, reason or "-",
        )
        negotiation = NegotiationResponse.from_domain(updated)
        await self._negotiations.publish_update(updated, negotiation)
        return ModerationResponse(
            negotiation=negotiation,
            moderation_id=entry.id,
            action=action,
            reason=reason,
            moderated_by=admin.id,
        )
