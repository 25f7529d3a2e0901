"""Repository Protocol — dependency inversion for testability.

Covers the two read-only collaborators the offer gate consults:
the account service (profile, order history) and the repayment ledger.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_account.domain.models import BuyerProfile


class AccountRepositoryProtocol(Protocol):
    async def get_buyer_profile(
        self, db: AsyncSession, user_id: str
    ) -> BuyerProfile | None: ...

    async def count_delivered_orders(self, db: AsyncSession, user_id: str) -> int: ...

    async def has_failed_repayment_since(
        self, db: AsyncSession, user_id: str, since: datetime
    ) -> bool: ...
