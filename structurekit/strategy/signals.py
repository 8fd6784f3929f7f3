"""Entry signal construction — pure functions, no I/O.

Turns a classified chart into either a priced LONG/SHORT plan or an
explicit WAIT.  The builder walks a fixed sequence of gates; the first
gate that fails decides the WAIT reason:

    confluence < 75                 → BELOW_CONFLUENCE_FLOOR
    bias is Range / Transition      → NON_DIRECTIONAL
    no reference price              → INSUFFICIENT_DATA
    entry or stop anchor missing    → STRUCTURE_INCOMPLETE
    fewer than two targets          → NO_VALID_TARGETS
    R:R under floor (after one
    higher-timeframe extension)     → RR_BELOW_FLOOR

Anything that clears every gate is emitted as ``SIGNAL_EMITTED``.
A missing signal is a normal outcome, so nothing here raises.
"""

import logging
from dataclasses import replace
from decimal import ROUND_CEILING, Decimal
from typing import Iterable, Optional

from structurekit.config import MIN_CONFLUENCE, Settings
from structurekit.models.analysis import (
    BELOW_CONFLUENCE_FLOOR,
    INSUFFICIENT_DATA,
    NO_VALID_TARGETS,
    NON_DIRECTIONAL,
    RR_BELOW_FLOOR,
    SIGNAL_EMITTED,
    STRUCTURE_INCOMPLETE,
    EntrySignal,
)
from structurekit.risk.targets import (
    enforce_ordering,
    extend_targets,
    format_ratio,
    risk_reward,
    select_targets,
)
from structurekit.risk.ticks import (
    derive_tick_size,
    format_price,
    offset_price,
    psych_step,
)
from structurekit.strategy.confluence import (
    classify_pattern,
    confluence_breakdown,
    recent_swing_prices,
)
from structurekit.strategy.models import DIRECTIONAL_BIASES, BiasState, ChartState
from structurekit.strategy.zones import numeric_swing_prices, swing_price

logger = logging.getLogger("structurekit")


# Stop/entry buffer: a fraction of the recent swing span, in whole ticks.
BUFFER_SPAN_FRACTION = Decimal("0.05")
MIN_BUFFER_TICKS = 2
MAX_BUFFER_TICKS = 20

STRONG_CONFLUENCE = 85


def structure_buffer(prices: list[float], tick: float) -> float:
    """Volatility-proportioned buffer placed beyond the anchor swings.

    5 % of the span of *prices*, rounded up to whole ticks and clamped to
    2–20 ticks.  Fewer than two prices → the 2-tick minimum.
    """
    d_tick = Decimal(repr(tick))
    ticks = MIN_BUFFER_TICKS
    if len(prices) >= 2:
        span = Decimal(repr(max(prices))) - Decimal(repr(min(prices)))
        raw = (span * BUFFER_SPAN_FRACTION / d_tick).to_integral_value(rounding=ROUND_CEILING)
        ticks = max(MIN_BUFFER_TICKS, min(MAX_BUFFER_TICKS, int(raw)))
    return float(ticks * d_tick)


def _higher_timeframe_prices(states: Iterable[ChartState]) -> list[float]:
    prices: list[float] = []
    for htf in states:
        prices.extend(numeric_swing_prices(htf.swings))
    return prices


def build_entry_signal(
    bias: BiasState,
    state: ChartState,
    settings: Optional[Settings] = None,
    top_down_states: Iterable[ChartState] = (),
    min_confluence: int = MIN_CONFLUENCE,
) -> EntrySignal:
    """Build the entry signal for a classified chart.

    Args:
        bias: Output of ``classify_bias(state)``.
        state: The execution-timeframe chart state.
        settings: Engine settings (R:R floor).  Defaults apply if omitted.
        top_down_states: Higher-timeframe chart states, used only to
            extend TP2 when the first target set falls short of the floor.
        min_confluence: Confluence gate (inclusive).

    Returns:
        ``EntrySignal``: LONG/SHORT with all four prices, or WAIT.
    """
    settings = settings or Settings()
    breakdown = confluence_breakdown(bias, state)
    confluence = breakdown.score
    pattern = classify_pattern(bias, state)
    logger.debug(
        "Confluence %d for %s bias (factors=%s, pattern=%s)",
        confluence, bias, breakdown.factors, pattern,
    )

    def _wait(reason: str, rationale: str, tick: Optional[float] = None) -> EntrySignal:
        logger.debug("Entry signal WAIT (%s): %s", reason, rationale)
        return EntrySignal(
            direction="WAIT",
            entry_price=None,
            stop_loss=None,
            take_profit_1=None,
            take_profit_2=None,
            risk_reward_ratio="N/A",
            rationale=rationale,
            confluence_score=confluence,
            signal_quality="INVALID",
            pattern_type=pattern,
            prop_firm_compliant=False,
            wait_reason=reason,
            tick_size=tick,
        )

    # 1 ── Confluence gate
    if confluence < min_confluence:
        return _wait(
            BELOW_CONFLUENCE_FLOOR,
            f"Low probability. Confluence {confluence}/100 (need {min_confluence}+). "
            "Wait for a clearer setup with a confirmed structure break and retest.",
        )

    # 2 ── Directional bias required
    if bias not in DIRECTIONAL_BIASES:
        return _wait(
            NON_DIRECTIONAL,
            f"{bias} conditions. No clear directional bias; "
            "wait for structure to develop or a clean break.",
        )

    direction = "LONG" if bias == "Bullish" else "SHORT"
    entry_swing = state.last_high if direction == "LONG" else state.last_low
    stop_swing = state.last_low if direction == "LONG" else state.last_high

    # 3 ── Reference price
    swing_prices = numeric_swing_prices(state.swings)
    if state.current_price is not None:
        reference = state.current_price
    elif swing_prices:
        reference = swing_prices[-1]
    else:
        return _wait(
            INSUFFICIENT_DATA,
            "Cannot determine prices from the chart. Make sure the price scale is visible.",
        )

    # 4 ── Tick and anchors
    tick = derive_tick_size(state.pair, state.price_region, reference)
    entry_anchor = swing_price(entry_swing)
    stop_anchor = swing_price(stop_swing)
    if entry_anchor is None or stop_anchor is None:
        return _wait(
            STRUCTURE_INCOMPLETE,
            f"{bias} bias detected but swing structure is incomplete: "
            "a readable swing high and swing low are both required.",
            tick,
        )
    inverted = entry_anchor <= stop_anchor if direction == "LONG" else entry_anchor >= stop_anchor
    if inverted:
        return _wait(
            STRUCTURE_INCOMPLETE,
            f"{bias} bias detected but the latest swings are inverted; "
            "wait for a clean swing sequence.",
            tick,
        )

    # 5 ── Entry and stop, buffered outward from the anchors
    buffer = structure_buffer(recent_swing_prices(state), tick)
    if direction == "LONG":
        entry = offset_price(entry_anchor, buffer, tick, "ceil")
        stop = offset_price(stop_anchor, -buffer, tick, "floor")
    else:
        entry = offset_price(entry_anchor, -buffer, tick, "floor")
        stop = offset_price(stop_anchor, buffer, tick, "ceil")

    # 6 ── Targets
    step = psych_step(state.pair, reference, tick)
    targets = select_targets(direction, entry, swing_prices, step, tick)
    if targets is None:
        return _wait(
            NO_VALID_TARGETS,
            "Insufficient structure beyond entry for two distinct targets.",
            tick,
        )

    # 7 ── Ordering, R:R, one higher-timeframe extension
    entry, stop, tp1, tp2 = enforce_ordering(direction, entry, stop, targets.tp1, targets.tp2, tick)
    ratio = risk_reward(direction, entry, stop, tp1)
    floor = Decimal(repr(float(settings.min_risk_reward)))

    extended = False
    if ratio is None or ratio < floor:
        htf_prices = _higher_timeframe_prices(top_down_states)
        wider = extend_targets(
            direction, replace(targets, tp1=tp1, tp2=tp2), htf_prices, tick,
        )
        if wider is not None:
            entry, stop, tp1, tp2 = enforce_ordering(direction, entry, stop, wider.tp1, wider.tp2, tick)
            ratio = risk_reward(direction, entry, stop, tp1)
            extended = True
            logger.debug("TP2 extended to higher-timeframe swing %s", tp2)

    # 8 ── R:R floor
    if ratio is None or ratio < floor:
        return _wait(
            RR_BELOW_FLOOR,
            f"Poor R:R. Current ratio {format_ratio(ratio)} "
            f"(need minimum 1:{floor:.1f}). Structure too tight; wait for wider targets.",
            tick,
        )

    if extended:
        quality = "WEAK"
    elif confluence >= STRONG_CONFLUENCE:
        quality = "STRONG"
    else:
        quality = "MEDIUM"

    ratio_text = format_ratio(ratio)
    side = "below" if direction == "LONG" else "above"
    rationale = (
        f"{direction} [{quality}]. Entry {format_price(entry, tick)}, "
        f"SL {format_price(stop, tick)} ({side} {stop_swing.label or 'swing'}). "
        f"TP1 {format_price(tp1, tick)}, TP2 {format_price(tp2, tick)}. "
        f"R:R {ratio_text}. Confluence {confluence}/100."
    )
    if extended:
        rationale += " TP2 extended to a higher-timeframe swing."

    logger.debug("Entry signal %s %s", direction, rationale)
    return EntrySignal(
        direction=direction,
        entry_price=entry,
        stop_loss=stop,
        take_profit_1=tp1,
        take_profit_2=tp2,
        risk_reward_ratio=ratio_text,
        rationale=rationale,
        confluence_score=confluence,
        signal_quality=quality,
        pattern_type=pattern,
        prop_firm_compliant=ratio >= floor,
        wait_reason=SIGNAL_EMITTED,
        tick_size=tick,
    )
