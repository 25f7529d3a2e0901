"""EligibilityService — assembles the buyer snapshot the offer gate evaluates."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sh_account.domain.models import BuyerEligibility
from src.sh_account.domain.repository import AccountRepositoryProtocol
from src.sh_account.infrastructure.persistence import AccountRepository
from src.sh_common.datetime_utils import months_ago, utc_now
from src.sh_common.errors import BuyerProfileNotFoundError


class EligibilityService:
    def __init__(
        self,
        repo: AccountRepositoryProtocol | None = None,
        lookback_months: int | None = None,
    ) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()
        self._lookback_months = (
            settings.REPAYMENT_LOOKBACK_MONTHS if lookback_months is None else lookback_months
        )

    async def snapshot(
        self, db: AsyncSession, buyer_id: str, now: datetime | None = None
    ) -> BuyerEligibility:
        profile = await self._repo.get_buyer_profile(db, buyer_id)
        if profile is None:
            raise BuyerProfileNotFoundError(buyer_id)

        delivered = await self._repo.count_delivered_orders(db, buyer_id)
        since = months_ago(now or utc_now(), self._lookback_months)
        failed = await self._repo.has_failed_repayment_since(db, buyer_id, since)

        return BuyerEligibility(
            loyalty_points=max(profile.loyalty_points, 0),
            past_delivered_orders=delivered,
            payment_verified=profile.payment_verified,
            recent_failed_repayment=failed,
        )
