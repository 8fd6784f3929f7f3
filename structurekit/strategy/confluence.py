"""Confluence scoring and setup classification — pure functions, no I/O.

The confluence score is a strict, additive/subtractive rule score that
authorises trade signals.  It is deterministic and is not a probability.

Factor weights::

    trend         +25 directional & clean   | +10 transition
    break         +30 structural + retest   | +20 structural | +10 any confirmed
    retest        +20 with structural break | +10 alone
    proximity     +15 current price within 1% of the anchor swing
    volatility    +10 recent swing span / mean in (0.5%, 3%)
    penalties     −30 chop | −25 range without structural break | −15 false breaks
"""

from dataclasses import dataclass, field
from typing import Literal, Optional

from structurekit.strategy.models import BiasState, ChartState
from structurekit.strategy.zones import numeric_swing_prices, swing_price


PatternType = Literal["REVERSAL", "BREAKOUT", "CONTINUATION", "PULLBACK", "NONE"]

PROXIMITY_PCT = 0.01
VOLATILITY_MIN = 0.005
VOLATILITY_MAX = 0.03
VOLATILITY_LOOKBACK = 4


@dataclass(frozen=True)
class ConfluenceBreakdown:
    """Per-factor contributions and the clamped total."""

    score: int
    factors: dict[str, int] = field(default_factory=dict)


def recent_swing_prices(state: ChartState, lookback: int = VOLATILITY_LOOKBACK) -> list[float]:
    """Up to *lookback* most recent numeric swing prices, oldest-first."""
    return numeric_swing_prices(state.swings)[-lookback:]


def volatility_ratio(prices: list[float]) -> Optional[float]:
    """Swing span relative to the mean price, or ``None`` for < 2 prices."""
    if len(prices) < 2:
        return None
    average = sum(prices) / len(prices)
    if average == 0:
        return None
    return (max(prices) - min(prices)) / average


def _anchor_price(bias: BiasState, state: ChartState) -> Optional[float]:
    if bias == "Bullish":
        return swing_price(state.last_low)
    if bias == "Bearish":
        return swing_price(state.last_high)
    return None


def confluence_breakdown(bias: BiasState, state: ChartState) -> ConfluenceBreakdown:
    """Score the setup factor by factor.  See module docstring for weights."""
    factors: dict[str, int] = {}
    structural = state.has_structural_break

    # Trend cleanliness
    if not state.chop_detected and bias in ("Bullish", "Bearish"):
        factors["trend"] = 25
    elif bias == "Transition":
        factors["trend"] = 10

    # Break quality, highest tier wins
    if structural and state.retest_present:
        factors["break"] = 30
    elif structural:
        factors["break"] = 20
    elif any(b.confirmed for b in state.breaks):
        factors["break"] = 10

    # Retest bonus, on top of the break tier
    if state.retest_present and structural:
        factors["retest"] = 20
    elif state.retest_present:
        factors["retest"] = 10

    # Price sitting at the structure we would trade from
    anchor = _anchor_price(bias, state)
    current = state.current_price
    if anchor and current is not None:
        if abs(current - anchor) / anchor < PROXIMITY_PCT:
            factors["proximity"] = 15

    ratio = volatility_ratio(recent_swing_prices(state))
    if ratio is not None and VOLATILITY_MIN < ratio < VOLATILITY_MAX:
        factors["volatility"] = 10

    if state.chop_detected:
        factors["chop_penalty"] = -30
    if bias == "Range" and not structural:
        factors["range_penalty"] = -25
    if state.range.false_breaks:
        factors["false_break_penalty"] = -15

    total = max(0, min(100, sum(factors.values())))
    return ConfluenceBreakdown(score=total, factors=factors)


def score_confluence(bias: BiasState, state: ChartState) -> int:
    """Clamped 0–100 confluence score."""
    return confluence_breakdown(bias, state).score


def classify_pattern(bias: BiasState, state: ChartState) -> PatternType:
    """Label the setup type from bias and break/retest state."""
    if bias == "Range":
        return "NONE"
    if bias == "Transition":
        return "REVERSAL"
    if state.has_confirmed_break and state.retest_present:
        return "BREAKOUT"
    if state.retest_present:
        return "PULLBACK"
    if any(b.type == "shift" for b in state.breaks):
        return "CONTINUATION"
    return "REVERSAL"
