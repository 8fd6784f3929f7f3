"""Narrative confidence score — coarse, additive, 0–100.

Shown alongside the analysis.  It never gates a trade; the confluence
score in ``confluence.py`` does that.
"""

from structurekit.models.analysis import Confidence
from structurekit.strategy.models import ChartState


BASELINE_SCORE = 50
BASELINE_EXPLANATION = "Baseline confidence"


def score_confidence(state: ChartState) -> Confidence:
    """Score how readable the chart structure is.

    Starts at 50.  Each rule is independent:

    * +10 clean directional swings (bullish/bearish, not choppy, ≥3 swings)
    * +10 a confirmed break that is not ``none``
    * +10 retest visible
    * −15 choppy price action
    * −10 range with false breaks

    The score is clamped to [0, 100].
    """
    score = BASELINE_SCORE
    reasons: list[str] = []

    if (
        state.trend_hint in ("bullish", "bearish")
        and not state.chop_detected
        and len(state.swings) >= 3
    ):
        score += 10
        reasons.append("Clean directional swings")

    if state.has_confirmed_break:
        score += 10
        reasons.append("Recent break confirmed")

    if state.retest_present:
        score += 10
        reasons.append("Retest visible")

    if state.chop_detected:
        score -= 15
        reasons.append("Choppy price action")

    if state.range.has_range and state.range.false_breaks:
        score -= 10
        reasons.append("Range with false breaks")

    return Confidence(
        score=max(0, min(100, score)),
        explanation="; ".join(reasons) or BASELINE_EXPLANATION,
    )
