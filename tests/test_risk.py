"""Tests for the risk module.

Covers tick inference, rounding, psychological levels, target selection,
ordering enforcement, risk:reward and position sizing.
"""

import math
from decimal import Decimal

import pytest

from structurekit.risk.position_sizer import calculate_position_size
from structurekit.risk.targets import (
    TargetSet,
    enforce_ordering,
    extend_targets,
    format_ratio,
    risk_reward,
    select_targets,
)
from structurekit.risk.ticks import (
    derive_tick_size,
    format_price,
    next_psych_level,
    offset_price,
    psych_step,
    round_to_tick,
    tick_decimals,
)


# ── Tick size ────────────────────────────────────────────────────────────


class TestTickSize:
    @pytest.mark.parametrize("pair", ["GBP/JPY", "usdjpy", "EUR_JPY"])
    def test_jpy_pair(self, pair):
        assert derive_tick_size(pair=pair, price_region="1.08456") == 0.01

    def test_price_region_precision(self):
        assert derive_tick_size(price_region="1.08456") == pytest.approx(0.00001)
        assert derive_tick_size(price_region="155.7-155.85") == pytest.approx(0.01)

    def test_integer_region_gives_unit_tick(self):
        assert derive_tick_size(pair="BTC/USD", price_region="42500-43000") == 1.0

    def test_comma_grouped_region_gives_unit_tick(self):
        assert derive_tick_size(pair="BTC/USD", price_region="42,500-43,000") == 1.0

    def test_region_precision_clamped_to_eight(self):
        assert derive_tick_size(price_region="1.123456789012") == pytest.approx(1e-8)

    def test_magnitude_heuristic(self):
        assert derive_tick_size(reference_price=1.0842) == 0.0001
        assert derive_tick_size(reference_price=2301.5) == 0.01

    def test_unreadable_region_falls_through(self):
        assert derive_tick_size(price_region="unknown", reference_price=42000) == 0.01

    def test_default(self):
        assert derive_tick_size() == 0.0001


class TestRounding:
    def test_nearest_half_up(self):
        assert round_to_tick(1.08456, 0.0001) == 1.0846
        assert round_to_tick(155.785, 0.01) == 155.79

    def test_ceil_and_floor(self):
        assert round_to_tick(1.08451, 0.0001, "ceil") == 1.0846
        assert round_to_tick(1.08459, 0.0001, "floor") == 1.0845

    def test_exact_multiple_is_stable(self):
        assert round_to_tick(156.14, 0.01, "ceil") == 156.14
        assert round_to_tick(156.14, 0.01, "floor") == 156.14

    def test_offset_is_decimal_exact(self):
        # 156.10 + 0.04 in binary floats lands just above 156.14
        assert offset_price(156.10, 0.04, 0.01, "ceil") == 156.14
        assert offset_price(155.60, -0.04, 0.01, "floor") == 155.56

    def test_rejects_bad_tick(self):
        with pytest.raises(ValueError, match="tick"):
            round_to_tick(1.0, 0)

    def test_rejects_bad_mode(self):
        with pytest.raises(ValueError, match="mode"):
            round_to_tick(1.0, 0.01, "up")

    def test_formatting_follows_tick(self):
        assert tick_decimals(0.0001) == 4
        assert tick_decimals(1.0) == 0
        assert format_price(1.085, 0.0001) == "1.0850"
        assert format_price(42500.0, 1.0) == "42500"


# ── Psychological levels ────────────────────────────────────────────────


class TestPsychLevels:
    def test_jpy_half_figure(self):
        assert psych_step("GBPJPY", 155.0, 0.01) == 0.5

    @pytest.mark.parametrize("price,step", [
        (42000.0, 100.0),
        (2300.0, 50.0),
        (156.0, 10.0),
        (25.0, 5.0),
        (1.08, 0.005),
    ])
    def test_magnitude_bands(self, price, step):
        assert psych_step(None, price, 0.0001) == step

    def test_never_finer_than_tick(self):
        assert psych_step(None, 1.08, 0.01) == 0.01

    def test_next_level_is_strictly_beyond(self):
        assert next_psych_level(156.14, 10.0, "LONG") == 160.0
        assert next_psych_level(160.0, 10.0, "LONG") == 170.0
        assert next_psych_level(40480.0, 100.0, "SHORT") == 40400.0
        assert next_psych_level(40400.0, 100.0, "SHORT") == 40300.0
        assert next_psych_level(1.085, 0.005, "LONG") == pytest.approx(1.09)

    def test_rejects_bad_direction(self):
        with pytest.raises(ValueError, match="direction"):
            next_psych_level(1.0, 0.005, "buy")


# ── Target selection ─────────────────────────────────────────────────────


class TestTargetSelection:
    def test_psych_levels_when_no_structure_beyond(self):
        targets = select_targets(
            "LONG", 156.14, [155.40, 155.95, 155.60, 156.10], 10.0, 0.01,
        )
        assert targets == TargetSet(160.0, 170.0, "psych", "psych")

    def test_structure_first_then_psych(self):
        targets = select_targets("LONG", 1.0850, [1.0870, 1.0920, 1.0800], 0.005, 0.0001)
        assert targets.tp1 == 1.087
        assert targets.tp1_source == "structure"
        assert targets.tp2 == 1.09
        assert targets.tp2_source == "psych"

    def test_structure_claims_colliding_psych_level(self):
        targets = select_targets("LONG", 1.0850, [1.0900, 1.0950], 0.005, 0.0001)
        assert targets.tp1 == 1.09
        assert targets.tp1_source == "structure"
        assert targets.tp2 == 1.095

    def test_short_targets_below_entry(self):
        targets = select_targets("SHORT", 1.0850, [1.0820, 1.0900], 0.005, 0.0001)
        assert targets.tp1 == 1.082
        assert targets.tp2 == 1.08

    def test_no_second_target_is_failure(self):
        # The first psych level rounds back onto the entry, leaving one candidate.
        assert select_targets("LONG", 1.00, [], 0.004, 0.01) is None

    def test_extension_promotes_tp2(self):
        base = TargetSet(1.087, 1.09, "structure", "psych")
        wider = extend_targets("LONG", base, [1.1000, 1.0880, 1.0950], 0.0001)
        assert wider == TargetSet(1.09, 1.095, "psych", "htf")

    def test_extension_without_htf_swing_beyond(self):
        base = TargetSet(1.087, 1.09, "structure", "psych")
        assert extend_targets("LONG", base, [1.0880], 0.0001) is None


class TestOrdering:
    def test_long_collisions_pushed_outward(self):
        levels = enforce_ordering("LONG", 1.1000, 1.1000, 1.1000, 1.1001, 0.0001)
        assert levels == (1.1, 1.0999, 1.1001, 1.1002)

    def test_short_collisions_pushed_outward(self):
        levels = enforce_ordering("SHORT", 1.1000, 1.1000, 1.1000, 1.0999, 0.0001)
        assert levels == (1.1, 1.1001, 1.0999, 1.0998)

    def test_ordered_levels_untouched(self):
        levels = enforce_ordering("LONG", 156.14, 155.56, 160.0, 170.0, 0.01)
        assert levels == (156.14, 155.56, 160.0, 170.0)

    def test_rejects_bad_direction(self):
        with pytest.raises(ValueError, match="direction"):
            enforce_ordering("WAIT", 1, 1, 1, 1, 0.01)


class TestRiskReward:
    def test_exact_ratio(self):
        assert risk_reward("LONG", 1.1000, 1.0950, 1.1100) == Decimal(2)
        assert risk_reward("SHORT", 1.1000, 1.1050, 1.0900) == Decimal(2)

    def test_zero_risk(self):
        assert risk_reward("LONG", 1.1, 1.1, 1.2) is None

    def test_format(self):
        assert format_ratio(Decimal("2.47")) == "1:2.5"
        assert format_ratio(Decimal(2)) == "1:2.0"
        assert format_ratio(None) == "N/A"


# ── Position sizing ──────────────────────────────────────────────────────


class TestPositionSizing:
    def test_major_pair(self):
        """$10,000, 1% risk, 30 pip stop, $10/pip/lot → 0.333 lots."""
        size = calculate_position_size(
            balance=10_000.0, risk_pct=1.0, entry_price=1.1000, stop_loss=1.0970,
        )
        assert size.risk_amount == pytest.approx(100.0)
        assert size.pips_at_risk == pytest.approx(30.0)
        assert size.lots == pytest.approx(0.33333, abs=1e-4)
        assert size.units == 33_333

    def test_jpy_pair(self):
        size = calculate_position_size(
            balance=5_000.0, risk_pct=2.0, entry_price=155.00, stop_loss=154.50,
            pip_size=0.01, pip_value_per_lot=6.5,
        )
        # 50 pips × $6.5 = $325 per lot; $100 / $325
        assert size.lots == pytest.approx(100.0 / 325.0)

    def test_rejects_zero_balance(self):
        with pytest.raises(ValueError, match="balance"):
            calculate_position_size(0, 1.0, 1.1, 1.09)

    def test_rejects_non_finite(self):
        with pytest.raises(ValueError, match="finite"):
            calculate_position_size(10_000, 1.0, math.nan, 1.09)

    def test_rejects_excessive_risk(self):
        with pytest.raises(ValueError, match="at most 100"):
            calculate_position_size(10_000, 150.0, 1.1, 1.09)

    def test_rejects_flat_stop(self):
        with pytest.raises(ValueError, match="must differ"):
            calculate_position_size(10_000, 1.0, 1.1, 1.1)
