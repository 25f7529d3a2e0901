"""Integer arithmetic utilities for minor-unit (paise) amounts.

All prices, offers and caps use int minor units. No float, no Decimal.
Ratios are expressed in basis points: 10000 bps = 1.0.
"""

CENTS_PER_UNIT = 100
BPS_DENOMINATOR = 10_000


def units_to_cents(units: int) -> int:
    return units * CENTS_PER_UNIT


def round_half_up_to_unit(cents: int) -> int:
    """Round a non-negative minor-unit amount to the nearest whole unit, halves up.

    Matches Math.round over currency values: 249950 -> 250000, 249949 -> 249900.
    """
    if cents < 0:
        raise ValueError(f"Amount must be non-negative, got {cents}")
    return (cents + CENTS_PER_UNIT // 2) // CENTS_PER_UNIT * CENTS_PER_UNIT


def apply_ratio_bps(cents: int, ratio_bps: int) -> int:
    """Scale ``cents`` by ``ratio_bps`` and round half up to a whole unit.

    The division is folded into the rounding so no intermediate truncation occurs:
    round(cents * bps / 10000 / 100) * 100.
    """
    if cents < 0 or ratio_bps < 0:
        raise ValueError(f"Amount and ratio must be non-negative, got {cents}, {ratio_bps}")
    scale = BPS_DENOMINATOR * CENTS_PER_UNIT
    return (cents * ratio_bps + scale // 2) // scale * CENTS_PER_UNIT


def cents_to_display(cents: int) -> str:
    """Convert minor units to display string: 300000 -> '₹3,000.00', -1200 -> '-₹12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-₹{abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"₹{cents // 100:,}.{cents % 100:02d}"
