"""Domain models for sh_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class BuyerProfile:
    user_id: str
    loyalty_points: int
    payment_verified: bool


@dataclass(frozen=True)
class BuyerEligibility:
    """Per-attempt snapshot consulted by the offer gate. Never persisted."""

    loyalty_points: int
    past_delivered_orders: int
    payment_verified: bool
    recent_failed_repayment: bool
