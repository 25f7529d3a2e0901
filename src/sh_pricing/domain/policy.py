"""Offer floor resolution — loyalty tiers, product ratio, absolute cap, repayment risk.

All arithmetic is integer: prices in minor units, ratios in basis points.
Floors round half up to whole currency units.

    ratio      = product ratio (default 9000 bps)
    ratio      = min(ratio, tier floor)        # first matching loyalty tier only
    ratio      = max(ratio, 9500)              # if a repayment failed recently
    by_ratio   = round(price × ratio)
    by_cap     = max(0, round(price − max_discount))
    min_allowed = max(by_ratio, by_cap)
"""

from dataclasses import dataclass

from src.sh_account.domain.models import BuyerEligibility
from src.sh_catalog.domain.models import Product
from src.sh_common.money import apply_ratio_bps, round_half_up_to_unit

DEFAULT_MIN_OFFER_RATIO_BPS: int = 9000
REPAYMENT_RISK_RATIO_BPS: int = 9500

# (minimum loyalty points, ratio floor in bps), checked highest first
LOYALTY_TIERS: tuple[tuple[int, int], ...] = (
    (2500, 5000),
    (1000, 6000),
    (500, 7000),
    (100, 8000),
)


@dataclass(frozen=True)
class PricingPolicy:
    base_price_cents: int
    negotiable: bool
    min_offer_ratio_bps: int
    max_discount_cents: int

    @classmethod
    def for_product(cls, product: Product, max_discount_cents: int) -> "PricingPolicy":
        ratio = product.min_offer_ratio_bps
        return cls(
            base_price_cents=product.price_cents,
            negotiable=product.negotiable,
            min_offer_ratio_bps=DEFAULT_MIN_OFFER_RATIO_BPS if ratio is None else ratio,
            max_discount_cents=max_discount_cents,
        )


@dataclass(frozen=True)
class OfferFloor:
    min_ratio_bps: int
    floor_by_ratio_cents: int
    floor_by_absolute_cents: int

    @property
    def min_allowed_cents(self) -> int:
        return max(self.floor_by_ratio_cents, self.floor_by_absolute_cents)


def loyalty_tier_ratio(loyalty_points: int) -> int | None:
    """Return the ratio floor of the highest tier reached, or None below 100 points."""
    for threshold, ratio_bps in LOYALTY_TIERS:
        if loyalty_points >= threshold:
            return ratio_bps
    return None


def resolve_min_ratio_bps(
    product_ratio_bps: int | None,
    loyalty_points: int,
    recent_failed_repayment: bool,
) -> int:
    ratio = DEFAULT_MIN_OFFER_RATIO_BPS if product_ratio_bps is None else product_ratio_bps

    tier_ratio = loyalty_tier_ratio(loyalty_points)
    if tier_ratio is not None:
        ratio = min(ratio, tier_ratio)

    # Risk penalty wins over any loyalty discount
    if recent_failed_repayment:
        ratio = max(ratio, REPAYMENT_RISK_RATIO_BPS)
    return ratio


def resolve_min_offer(policy: PricingPolicy, eligibility: BuyerEligibility) -> OfferFloor:
    ratio = resolve_min_ratio_bps(
        policy.min_offer_ratio_bps,
        eligibility.loyalty_points,
        eligibility.recent_failed_repayment,
    )
    by_ratio = apply_ratio_bps(policy.base_price_cents, ratio)
    by_absolute = round_half_up_to_unit(
        max(0, policy.base_price_cents - policy.max_discount_cents)
    )
    return OfferFloor(
        min_ratio_bps=ratio,
        floor_by_ratio_cents=by_ratio,
        floor_by_absolute_cents=by_absolute,
    )
