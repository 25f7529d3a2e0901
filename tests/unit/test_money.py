"""Tests for sh_common.money integer arithmetic."""

import pytest

from src.sh_common.money import (
    apply_ratio_bps,
    cents_to_display,
    round_half_up_to_unit,
    units_to_cents,
)


class TestRoundHalfUpToUnit:
    def test_exact_unit_unchanged(self) -> None:
        assert round_half_up_to_unit(250000) == 250000

    def test_half_rounds_up(self) -> None:
        assert round_half_up_to_unit(249950) == 250000

    def test_below_half_rounds_down(self) -> None:
        assert round_half_up_to_unit(249949) == 249900

    def test_zero(self) -> None:
        assert round_half_up_to_unit(0) == 0

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            round_half_up_to_unit(-1)


class TestApplyRatioBps:
    def test_ninety_percent(self) -> None:
        assert apply_ratio_bps(300000, 9000) == 270000

    def test_sixty_percent(self) -> None:
        assert apply_ratio_bps(300000, 6000) == 180000

    def test_rounds_to_whole_unit(self) -> None:
        # 999.99 * 0.9 = 899.991 -> 900
        assert apply_ratio_bps(99999, 9000) == 90000

    def test_half_unit_rounds_up(self) -> None:
        # 1.50 * 1.0 -> 2
        assert apply_ratio_bps(150, 10000) == 200

    def test_full_ratio_is_rounded_price(self) -> None:
        assert apply_ratio_bps(123449, 10000) == 123400


class TestConversions:
    def test_units_to_cents(self) -> None:
        assert units_to_cents(500) == 50000

    def test_display(self) -> None:
        assert cents_to_display(300000) == "₹3,000.00"
        assert cents_to_display(5) == "₹0.05"
        assert cents_to_display(-1200) == "-₹12.00"
