"""StructureKit — analysis engine (composition pipeline).

Chart state flows strictly forward through the pure stages:

    bias → structure narrative / key levels → confidence
         → entry signal (confluence, pattern, ticks, targets) → sniper plan
         → AnalysisResult

No stage mutates an earlier stage's output and nothing here performs I/O,
so analyses can run in parallel without coordination.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from structurekit.config import Settings
from structurekit.models.analysis import (
    AnalysisResult,
    Bias,
    BreakSummary,
    EntrySignal,
    Meta,
    RangeSummary,
    SniperPlan,
    Structure,
)
from structurekit.strategy.bias import classify_bias, describe_trend
from structurekit.strategy.confidence import score_confidence
from structurekit.strategy.levels import extract_key_levels
from structurekit.strategy.models import BiasState, Break, ChartState, TopDownFrame
from structurekit.strategy.signals import build_entry_signal

logger = logging.getLogger("structurekit")

_BREAK_LABELS = {"bos": "BoS", "shift": "Shift"}
DEFAULT_RISK_NOTE = "Respect invalidation and position sizing."


def _summarise_break(brk: Break) -> BreakSummary:
    label = _BREAK_LABELS.get(brk.type, "None")
    if brk.description:
        description = brk.description
    elif brk.type == "none":
        description = "No clear break"
    else:
        description = "Recent structure break"
    return BreakSummary(type=label, description=description)


def build_structure(state: ChartState) -> Structure:
    """Narrative structure summary for display."""
    return Structure(
        trend_definition=describe_trend(state.trend_hint, state.swings),
        recent_swings=state.swings,
        breaks=tuple(_summarise_break(b) for b in state.breaks),
        range=RangeSummary(
            is_range=bool(state.range.has_range),
            top_zone=state.range.top_zone or "unknown",
            bottom_zone=state.range.bottom_zone or "unknown",
        ),
    )


def build_plan(
    bias: BiasState,
    state: ChartState,
    structure: Structure,
    entry_signal: Optional[EntrySignal],
) -> SniperPlan:
    """Narrative wait-for / trigger / invalidation / target plan for *bias*."""
    last_high = state.last_high
    last_low = state.last_low

    if bias == "Bullish":
        invalidation = (last_low.zone,) if last_low and last_low.zone else ()
        targets = (last_high.zone,) if last_high and last_high.zone else ()
    elif bias == "Bearish":
        invalidation = (last_high.zone,) if last_high and last_high.zone else ()
        targets = (last_low.zone,) if last_low and last_low.zone else ()
    else:
        invalidation = ()
        targets = ()

    # Ranging or choppy with nothing confirmed → stand aside
    if (bias == "Range" or state.chop_detected) and not state.has_confirmed_break:
        return SniperPlan(
            type="NoTrade",
            wait_for=(
                "Wait for a clean break and close beyond the range boundary",
                "Look for a retest to hold",
            ),
            trigger=("Do not trade until break confirms",),
            invalidation=("Any fake-out back into the range",),
            targets=tuple(
                z for z in (structure.range.top_zone, structure.range.bottom_zone) if z
            ),
            entry_signal=entry_signal,
        )

    plan_type = "RangePlay" if state.range.has_range else "Continuation"

    if bias == "Bullish":
        return SniperPlan(
            type=plan_type,
            wait_for=(
                "Pullback that holds above last swing low",
                "Retest of broken structure",
            ),
            trigger=(
                "Bullish rejection candle at support",
                "Break of minor high after pullback",
            ),
            invalidation=invalidation or ("Close below prior swing low",),
            targets=targets or ("Next visible swing high zone",),
            entry_signal=entry_signal,
        )

    if bias == "Bearish":
        return SniperPlan(
            type=plan_type,
            wait_for=(
                "Pullback that holds below last swing high",
                "Retest of broken support as resistance",
            ),
            trigger=(
                "Bearish rejection candle at resistance",
                "Break of minor low after pullback",
            ),
            invalidation=invalidation or ("Close above prior swing high",),
            targets=targets or ("Next visible swing low zone",),
            entry_signal=entry_signal,
        )

    # Transition, or a range that has already broken
    return SniperPlan(
        type="Reversal",
        wait_for=("Clear break in opposite direction", "Retest holding the break"),
        trigger=("Rejection at retest", "Minor structure break on lower timeframe"),
        invalidation=invalidation or ("Close back inside prior structure",),
        targets=targets or ("Opposing swing zone",),
        entry_signal=entry_signal,
    )


def build_risk_notes(state: ChartState) -> tuple[str, ...]:
    notes: list[str] = []
    if state.chop_detected:
        notes.append("Choppy structure detected; trade selectivity required.")
    if state.range.has_range and not any(b.type != "none" for b in state.breaks):
        notes.append("Range conditions; wait for boundary break.")
    if not state.swings:
        notes.append("Few swings visible; zoomed-out clarity may help.")
    return tuple(notes) or (DEFAULT_RISK_NOTE,)


def build_analysis(
    state: ChartState,
    top_down_states: Optional[Sequence[ChartState]] = None,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """Run the full analysis for one chart state.

    Args:
        state: Execution-timeframe chart state.
        top_down_states: Optional higher-timeframe chart states; used only
            to extend take-profit selection.
        settings: Engine settings; defaults apply if omitted.

    Returns:
        Immutable ``AnalysisResult``.  Never raises for a validated state;
        an untradeable chart yields a WAIT entry signal.
    """
    settings = settings or Settings()
    bias = classify_bias(state)
    structure = build_structure(state)
    key_levels = tuple(extract_key_levels(state))
    confidence = score_confidence(state)
    entry_signal = build_entry_signal(
        bias, state, settings=settings, top_down_states=top_down_states or (),
    )
    plan = build_plan(bias, state, structure, entry_signal)

    logger.debug(
        "Analysis %s %s: bias=%s plan=%s signal=%s confidence=%d",
        state.pair or "unknown", state.timeframe or "unknown",
        bias, plan.type, entry_signal.direction, confidence.score,
    )

    return AnalysisResult(
        meta=Meta(
            pair=state.pair or "unknown",
            timeframe=state.timeframe or "unknown",
            source=settings.source_label,
            notes=state.notes or "",
        ),
        bias=Bias(state=bias, reason=structure.trend_definition),
        structure=structure,
        key_levels=key_levels,
        sniper_plan=plan,
        risk_notes=build_risk_notes(state),
        confidence=confidence,
        top_down=state.top_down,
    )


def compose_top_down(states: Sequence[ChartState]) -> tuple[TopDownFrame, ...]:
    """One summary frame per chart state, in the order given."""
    return tuple(
        TopDownFrame(
            timeframe=s.timeframe or f"TF-{i + 1}",
            bias=s.trend_hint,
            key_level=s.price_region,
            narrative=s.notes,
        )
        for i, s in enumerate(states)
    )


def analyze_multi(
    states: Sequence[ChartState],
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """Top-down analysis of several charts of the same instrument.

    The last state is the execution timeframe; the earlier ones are
    higher-timeframe context.  Frames already carried by the execution
    state are kept as given; otherwise one frame per state is composed.

    Raises:
        ValueError: If *states* is empty.
    """
    if not states:
        raise ValueError("states must contain at least one chart state")
    primary = states[-1]
    if not primary.top_down:
        primary = replace(primary, top_down=compose_top_down(states))
    return build_analysis(primary, top_down_states=states[:-1], settings=settings)
