"""Chart-state data models — typed representations of the engine input.

A chart state is what the vision collaborator (or a trader typing it in by
hand) reports about a single chart.  Every record is frozen and collections
are tuples, so one state can be shared across concurrent analyses.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional


TrendHint = Literal["bullish", "bearish", "range", "transition", "unknown"]
BiasState = Literal["Bullish", "Bearish", "Range", "Transition"]
SwingType = Literal["SwingHigh", "SwingLow"]
BreakType = Literal["bos", "shift", "none"]

DIRECTIONAL_BIASES: tuple[str, ...] = ("Bullish", "Bearish")


@dataclass(frozen=True)
class Swing:
    """A swing high or low, identified by label and a free-text price zone."""

    type: SwingType
    label: str
    zone: str
    price: Optional[float] = None


@dataclass(frozen=True)
class Break:
    """A structural break reported on the chart."""

    type: BreakType
    confirmed: bool
    description: Optional[str] = None

    @property
    def is_structural(self) -> bool:
        """Confirmed break of structure or shift."""
        return self.confirmed and self.type in ("bos", "shift")


@dataclass(frozen=True)
class RangeInfo:
    """Range boundaries, if price is ranging."""

    has_range: bool = False
    top_zone: Optional[str] = None
    bottom_zone: Optional[str] = None
    false_breaks: Optional[bool] = None


@dataclass(frozen=True)
class TopDownFrame:
    """A higher/lower timeframe summary carried alongside the analysis."""

    timeframe: str
    bias: str  # a trend hint or a bias state
    key_level: Optional[str] = None
    narrative: Optional[str] = None


@dataclass(frozen=True)
class ChartState:
    """Structured description of one price chart."""

    trend_hint: TrendHint = "unknown"
    swings: tuple[Swing, ...] = ()
    breaks: tuple[Break, ...] = ()
    range: RangeInfo = field(default_factory=RangeInfo)
    pair: Optional[str] = None
    timeframe: Optional[str] = None
    current_price: Optional[float] = None
    price_region: Optional[str] = None
    chop_detected: Optional[bool] = None
    retest_present: Optional[bool] = None
    notes: Optional[str] = None
    top_down: tuple[TopDownFrame, ...] = ()

    @property
    def last_high(self) -> Optional[Swing]:
        """Most recent swing high by list order (not the highest price)."""
        return _last_of_type(self.swings, "SwingHigh")

    @property
    def last_low(self) -> Optional[Swing]:
        """Most recent swing low by list order (not the lowest price)."""
        return _last_of_type(self.swings, "SwingLow")

    @property
    def has_confirmed_break(self) -> bool:
        return any(b.confirmed and b.type != "none" for b in self.breaks)

    @property
    def has_structural_break(self) -> bool:
        return any(b.is_structural for b in self.breaks)


def _last_of_type(swings: tuple[Swing, ...], swing_type: str) -> Optional[Swing]:
    for swing in reversed(swings):
        if swing.type == swing_type:
            return swing
    return None
