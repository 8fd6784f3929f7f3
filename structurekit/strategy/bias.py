"""Directional bias — pure functions, no I/O.

Maps a chart state onto one of four bias states and describes the trend
in a sentence that doubles as the bias reason.
"""

from structurekit.strategy.models import BiasState, ChartState, Swing


_HINT_TO_BIAS: dict[str, BiasState] = {
    "bullish": "Bullish",
    "bearish": "Bearish",
    "range": "Range",
    "transition": "Transition",
}


def classify_bias(state: ChartState) -> BiasState:
    """Classify the directional bias of a chart.

    Rules, in priority order:
        - Choppy **and** ranging → ``"Range"``.
        - Otherwise mirror ``trend_hint``.
        - ``"unknown"`` (or anything unrecognised) → ``"Transition"``.
    """
    if state.chop_detected and state.range.has_range:
        return "Range"
    return _HINT_TO_BIAS.get(state.trend_hint, "Transition")


def describe_trend(trend_hint: str, swings: tuple[Swing, ...]) -> str:
    """One-line narrative of the trend, anchored on the latest swing label."""
    last = swings[-1].label if swings and swings[-1].label else "latest leg"
    if trend_hint == "bullish":
        return f"Uptrend with higher lows, current leg pushing beyond {last}"
    if trend_hint == "bearish":
        return f"Downtrend with lower highs, current leg extending past {last}"
    if trend_hint == "range":
        return "Sideways range, price oscillating between visible bounds"
    if trend_hint == "transition":
        return f"Potential transition after a break in structure around {last}"
    return "Structure unclear from the screenshot"
