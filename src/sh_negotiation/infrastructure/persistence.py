# src/sh_negotiation/infrastructure/persistence.py
"""NegotiationRepository — raw SQL persistence implementation.

Status transitions use a conditional UPDATE (``WHERE status = :expected``)
so two concurrent deciders cannot both win; the loser sees zero rows.
asyncpg NULL parameter pattern: CAST(:param AS TEXT) IS NULL for optional filters.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_negotiation.domain.models import ModerationEntry, Negotiation, NegotiationPage

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, product_id, buyer_id, seller_id, sender_id,
    type, status, amount_cents, message, created_at, updated_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO chat_messages (id, product_id, buyer_id, seller_id, sender_id,
        type, status, amount_cents, message)
    VALUES (:id, :product_id, :buyer_id, :seller_id, :sender_id,
        :type, :status, :amount_cents, :message)
    RETURNING {_COLUMNS}
""")

_GET_BY_ID_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM chat_messages WHERE id = :id
""")

_CAS_STATUS_SQL = text(f"""
    UPDATE chat_messages
    SET status = :new_status, updated_at = NOW()
    WHERE id = :id AND type = 'offer' AND status = :expected_status
    RETURNING {_COLUMNS}
""")

_FILTER = """
    WHERE (CAST(:buyer_id AS TEXT) IS NULL OR buyer_id = CAST(:buyer_id AS TEXT))
      AND (CAST(:seller_id AS TEXT) IS NULL OR seller_id = CAST(:seller_id AS TEXT))
      AND (CAST(:type AS TEXT) IS NULL OR type = CAST(:type AS TEXT))
      AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
"""

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM chat_messages
    {_FILTER}
    ORDER BY created_at DESC, id DESC
    OFFSET :offset
    LIMIT :limit
""")

_COUNT_SQL = text(f"""
    SELECT COUNT(*) FROM chat_messages
    {_FILTER}
""")

_CONVERSATION_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM chat_messages
    WHERE product_id = :product_id
      AND ((buyer_id = :user_id AND seller_id = :counterpart_id)
           OR (buyer_id = :counterpart_id AND seller_id = :user_id))
    ORDER BY created_at ASC, id ASC
""")

_HAS_CONVERSATION_SQL = text("""
    SELECT EXISTS (
        SELECT 1 FROM chat_messages
        WHERE product_id = :product_id AND buyer_id = :buyer_id AND seller_id = :seller_id
    )
""")

_INSERT_MODERATION_SQL = text("""
    INSERT INTO negotiation_moderations (id, negotiation_id, action, reason, moderated_by)
    VALUES (:id, :negotiation_id, :action, :reason, :moderated_by)
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_negotiation(row: Any) -> Negotiation:
    return Negotiation(
        id=row.id,
        product_id=row.product_id,
        buyer_id=row.buyer_id,
        seller_id=row.seller_id,
        sender_id=row.sender_id,
        type=row.type,
        status=row.status,
        amount_cents=row.amount_cents,
        message=row.message,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class NegotiationRepository:
    """Concrete implementation of NegotiationRepositoryProtocol using raw SQL."""

    async def save(self, negotiation: Negotiation, db: AsyncSession) -> Negotiation:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": negotiation.id,
                "product_id": negotiation.product_id,
                "buyer_id": negotiation.buyer_id,
                "seller_id": negotiation.seller_id,
                "sender_id": negotiation.sender_id,
                "type": negotiation.type,
                "status": negotiation.status,
                "amount_cents": negotiation.amount_cents,
                "message": negotiation.message,
            },
        )
        return _row_to_negotiation(result.fetchone())

    async def get_by_id(self, negotiation_id: str, db: AsyncSession) -> Negotiation | None:
        result = await db.execute(_GET_BY_ID_SQL, {"id": negotiation_id})
        row = result.fetchone()
        return _row_to_negotiation(row) if row else None

    async def compare_and_set_status(
        self,
        negotiation_id: str,
        expected_status: str,
        new_status: str,
        db: AsyncSession,
    ) -> Negotiation | None:
        result = await db.execute(
            _CAS_STATUS_SQL,
            {
                "id": negotiation_id,
                "expected_status": expected_status,
                "new_status": new_status,
            },
        )
        row = result.fetchone()
        return _row_to_negotiation(row) if row else None

    async def list_page(
        self,
        buyer_id: str | None,
        seller_id: str | None,
        message_type: str | None,
        status: str | None,
        offset: int,
        limit: int,
        db: AsyncSession,
    ) -> NegotiationPage:
        params: dict[str, Any] = {
            "buyer_id": buyer_id,
            "seller_id": seller_id,
            "type": message_type,
            "status": status,
        }
        rows = (
            await db.execute(_LIST_SQL, {**params, "offset": offset, "limit": limit})
        ).fetchall()
        total = (await db.execute(_COUNT_SQL, params)).scalar_one()
        return NegotiationPage(
            items=[_row_to_negotiation(row) for row in rows],
            total=int(total),
        )

    async def list_conversation(
        self, product_id: str, user_id: str, counterpart_id: str, db: AsyncSession
    ) -> list[Negotiation]:
        result = await db.execute(
            _CONVERSATION_SQL,
            {
                "product_id": product_id,
                "user_id": user_id,
                "counterpart_id": counterpart_id,
            },
        )
        return [_row_to_negotiation(row) for row in result.fetchall()]

    async def has_conversation(
        self, product_id: str, buyer_id: str, seller_id: str, db: AsyncSession
    ) -> bool:
        result = await db.execute(
            _HAS_CONVERSATION_SQL,
            {"product_id": product_id, "buyer_id": buyer_id, "seller_id": seller_id},
        )
        return bool(result.scalar_one())

    async def add_moderation(self, entry: ModerationEntry, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_MODERATION_SQL,
            {
                "id": entry.id,
                "negotiation_id": entry.negotiation_id,
                "action": entry.action,
                "reason": entry.reason,
                "moderated_by": entry.moderated_by,
            },
        )
