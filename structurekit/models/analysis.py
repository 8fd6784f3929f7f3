"""Analysis output models — the immutable record handed to collaborators.

Downstream code serialises, persists or renders an ``AnalysisResult``
without further computation, so ``to_dict()`` is the wire shape.
"""

from dataclasses import asdict, dataclass, field
from typing import Literal, Optional

from structurekit.strategy.models import BiasState, Swing, TopDownFrame


Direction = Literal["LONG", "SHORT", "WAIT"]
SignalQuality = Literal["STRONG", "MEDIUM", "WEAK", "INVALID"]
PlanType = Literal["Continuation", "Reversal", "RangePlay", "NoTrade"]

# Terminal states of the entry-signal builder.
INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
BELOW_CONFLUENCE_FLOOR = "BELOW_CONFLUENCE_FLOOR"
NON_DIRECTIONAL = "NON_DIRECTIONAL"
STRUCTURE_INCOMPLETE = "STRUCTURE_INCOMPLETE"
NO_VALID_TARGETS = "NO_VALID_TARGETS"
RR_BELOW_FLOOR = "RR_BELOW_FLOOR"
SIGNAL_EMITTED = "SIGNAL_EMITTED"


@dataclass(frozen=True)
class Meta:
    pair: str
    timeframe: str
    source: str
    notes: str


@dataclass(frozen=True)
class Bias:
    state: BiasState
    reason: str


@dataclass(frozen=True)
class BreakSummary:
    """A break relabelled for display (``BoS`` / ``Shift`` / ``None``)."""

    type: Literal["BoS", "Shift", "None"]
    description: str


@dataclass(frozen=True)
class RangeSummary:
    is_range: bool
    top_zone: str
    bottom_zone: str


@dataclass(frozen=True)
class Structure:
    trend_definition: str
    recent_swings: tuple[Swing, ...]
    breaks: tuple[BreakSummary, ...]
    range: RangeSummary


@dataclass(frozen=True)
class KeyLevel:
    name: str
    zone: str
    why_it_matters: str


@dataclass(frozen=True)
class EntrySignal:
    """A priced trade plan, or an explicit WAIT verdict.

    Prices are ``None`` only when ``direction == "WAIT"``.
    """

    direction: Direction
    entry_price: Optional[float]
    stop_loss: Optional[float]
    take_profit_1: Optional[float]
    take_profit_2: Optional[float]
    risk_reward_ratio: str
    rationale: str
    confluence_score: int
    signal_quality: SignalQuality
    pattern_type: str
    prop_firm_compliant: bool
    wait_reason: str = SIGNAL_EMITTED
    tick_size: Optional[float] = None

    @property
    def is_actionable(self) -> bool:
        return self.direction != "WAIT"


@dataclass(frozen=True)
class SniperPlan:
    type: PlanType
    wait_for: tuple[str, ...]
    trigger: tuple[str, ...]
    invalidation: tuple[str, ...]
    targets: tuple[str, ...]
    entry_signal: Optional[EntrySignal] = None


@dataclass(frozen=True)
class Confidence:
    score: int
    explanation: str


@dataclass(frozen=True)
class AnalysisResult:
    """Everything the engine derives from one chart state."""

    meta: Meta
    bias: Bias
    structure: Structure
    key_levels: tuple[KeyLevel, ...]
    sniper_plan: SniperPlan
    risk_notes: tuple[str, ...]
    confidence: Confidence
    top_down: tuple[TopDownFrame, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """JSON-ready dict (tuples become lists, key order is stable)."""
        return _listify(asdict(self))


def _listify(value):
    if isinstance(value, dict):
        return {k: _listify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_listify(v) for v in value]
    return value
