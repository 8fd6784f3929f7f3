"""Bundled demo chart states.

Used by the CLI and the ``/demo`` endpoint when no chart is supplied.
Demos are picked by index, never at random, so repeated runs agree.
"""

from structurekit.strategy.models import Break, ChartState, RangeInfo, Swing


DEMO_CHART_STATES: tuple[ChartState, ...] = (
    ChartState(
        pair="GBP/JPY",
        timeframe="1H",
        price_region="155.70-155.80",
        trend_hint="bullish",
        swings=(
            Swing("SwingLow", "S1", "155.40"),
            Swing("SwingHigh", "H1", "155.95"),
            Swing("SwingLow", "S2", "155.60"),
            Swing("SwingHigh", "H2", "156.10"),
        ),
        breaks=(Break("bos", True, "Break above H1 at 155.95"),),
        range=RangeInfo(has_range=False, top_zone="156.10", bottom_zone="155.40"),
        chop_detected=False,
        retest_present=True,
        notes="Clear uptrend with higher highs and higher lows",
    ),
    ChartState(
        pair="EUR/USD",
        timeframe="4H",
        price_region="1.0850",
        trend_hint="range",
        swings=(
            Swing("SwingHigh", "R_Top", "1.0920"),
            Swing("SwingLow", "R_Bot", "1.0780"),
        ),
        breaks=(Break("none", False, "No clear break yet"),),
        range=RangeInfo(
            has_range=True,
            top_zone="1.0920",
            bottom_zone="1.0780",
            false_breaks=True,
        ),
        chop_detected=True,
        retest_present=False,
        notes="Ranging within clear bounds, multiple false breaks",
    ),
    ChartState(
        pair="BTC/USD",
        timeframe="D",
        price_region="42500-43000",
        trend_hint="bearish",
        swings=(
            Swing("SwingHigh", "HH1", "43500"),
            Swing("SwingLow", "LL1", "41000"),
            Swing("SwingHigh", "LH1", "42800"),
            Swing("SwingLow", "LL2", "40500"),
        ),
        breaks=(Break("shift", True, "Shift to lower lows"),),
        range=RangeInfo(has_range=False),
        chop_detected=False,
        retest_present=True,
        notes="Lower highs and lower lows define downtrend; retest of broken high",
    ),
    ChartState(
        pair="XAU/USD",
        timeframe="15m",
        current_price=2295.2,
        price_region="2294.5-2296.0",
        trend_hint="bullish",
        swings=(
            Swing("SwingLow", "HL1", "2291.2-2291.6", 2291.4),
            Swing("SwingHigh", "HH1", "2299.7-2300.1", 2299.9),
            Swing("SwingLow", "HL2", "2294.4-2294.8", 2294.6),
            Swing("SwingHigh", "HH2", "2301.9-2302.3", 2302.1),
        ),
        breaks=(Break("bos", True, "Close above HH1 at 2299.9"),),
        range=RangeInfo(has_range=False),
        chop_detected=False,
        retest_present=True,
        notes="Higher lows holding; pullback retesting HL2",
    ),
)


def get_demo_state(index: int = 0) -> ChartState:
    """Return demo chart state *index* (wraps around)."""
    return DEMO_CHART_STATES[index % len(DEMO_CHART_STATES)]
