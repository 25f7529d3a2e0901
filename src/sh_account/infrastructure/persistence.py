"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

All queries are read-only. Loyalty points are consulted here and never
debited; point redemption belongs to the checkout flow.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_account.domain.models import BuyerProfile
from src.sh_common.enums import OrderStatus, RepaymentStatus

_GET_PROFILE_SQL = text("""
    SELECT id, loyalty_points, payment_verified
    FROM users
    WHERE CAST(id AS TEXT) = :user_id
""")

_COUNT_DELIVERED_SQL = text("""
    SELECT COUNT(*)
    FROM orders
    WHERE CAST(user_id AS TEXT) = :user_id AND status = :status
""")

_FAILED_REPAYMENT_SQL = text("""
    SELECT EXISTS (
        SELECT 1
        FROM repayments
        WHERE CAST(borrower_id AS TEXT) = :user_id
          AND status = :status
          AND updated_at >= :since
    )
""")


class AccountRepository:
    async def get_buyer_profile(
        self, db: AsyncSession, user_id: str
    ) -> BuyerProfile | None:
        result = await db.execute(_GET_PROFILE_SQL, {"user_id": user_id})
        row = result.fetchone()
        if row is None:
            return None
        return BuyerProfile(
            user_id=str(row.id),
            loyalty_points=row.loyalty_points or 0,
            payment_verified=bool(row.payment_verified),
        )

    async def count_delivered_orders(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            _COUNT_DELIVERED_SQL, {"user_id": user_id, "status": OrderStatus.DELIVERED.value}
        )
        return int(result.scalar_one())

    async def has_failed_repayment_since(
        self, db: AsyncSession, user_id: str, since: datetime
    ) -> bool:
        result = await db.execute(
            _FAILED_REPAYMENT_SQL,
            {"user_id": user_id, "since": since, "status": RepaymentStatus.FAILED.value},
        )
        return bool(result.scalar_one())
