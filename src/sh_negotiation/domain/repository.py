"""NegotiationRepository Protocol — interface contract for persistence layer."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_negotiation.domain.models import ModerationEntry, Negotiation, NegotiationPage


class NegotiationRepositoryProtocol(Protocol):
    async def save(self, negotiation: Negotiation, db: AsyncSession) -> Negotiation: ...

    async def get_by_id(self, negotiation_id: str, db: AsyncSession) -> Negotiation | None: ...

    async def compare_and_set_status(
        self,
        negotiation_id: str,
        expected_status: str,
        new_status: str,
        db: AsyncSession,
    ) -> Negotiation | None:
        """Write ``new_status`` only if the stored status still equals ``expected_status``.

        Returns the updated record, or None when another writer got there first.
        """
        ...

    async def list_page(
        self,
        buyer_id: str | None,
        seller_id: str | None,
        message_type: str | None,
        status: str | None,
        offset: int,
        limit: int,
        db: AsyncSession,
    ) -> NegotiationPage: ...

    async def list_conversation(
        self, product_id: str, user_id: str, counterpart_id: str, db: AsyncSession
    ) -> list[Negotiation]: ...

    async def has_conversation(
        self, product_id: str, buyer_id: str, seller_id: str, db: AsyncSession
    ) -> bool:
        """True if any message or offer already links this buyer and seller on the product."""
        ...

    async def add_moderation(self, entry: ModerationEntry, db: AsyncSession) -> None: ...
