"""Take-profit selection and level ordering — pure math, no I/O.

Targets come from market structure first: swing prices beyond the entry,
plus the next two psychological (round-number) levels as extra candidates.
TP1 is the nearest candidate; TP2 the nearest one strictly beyond TP1.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from structurekit.risk.ticks import next_psych_level, round_to_tick


@dataclass(frozen=True)
class TargetSet:
    """Selected take-profit levels and where each came from."""

    tp1: float
    tp2: float
    tp1_source: str  # "structure", "psych" or "htf"
    tp2_source: str


def _check_direction(direction: str) -> None:
    if direction not in ("LONG", "SHORT"):
        raise ValueError(f"direction must be 'LONG' or 'SHORT', got '{direction}'")


def _beyond(price: float, reference: float, direction: str) -> bool:
    if direction == "LONG":
        return price > reference
    return price < reference


def _nearest_beyond(
    candidates: dict[float, str],
    reference: float,
    direction: str,
) -> Optional[float]:
    beyond = [p for p in candidates if _beyond(p, reference, direction)]
    if not beyond:
        return None
    return min(beyond, key=lambda p: abs(p - reference))


def _collect(
    prices: Iterable[float],
    source: str,
    tick: float,
    candidates: dict[float, str],
) -> None:
    for price in prices:
        rounded = round_to_tick(price, tick)
        # First source to claim a level keeps it (structure before psych).
        candidates.setdefault(rounded, source)


def select_targets(
    direction: str,
    entry: float,
    structural_prices: Iterable[float],
    step: float,
    tick: float,
) -> Optional[TargetSet]:
    """Pick TP1 and TP2 beyond *entry*.

    Args:
        direction: ``"LONG"`` or ``"SHORT"``.
        entry: Entry price (already tick-rounded).
        structural_prices: Swing prices from the chart.
        step: Psychological level spacing.
        tick: Rounding granularity.

    Returns:
        ``TargetSet``, or ``None`` when fewer than two distinct candidates
        lie beyond the entry.  Callers must treat ``None`` as insufficient
        structure, not substitute a default.
    """
    _check_direction(direction)

    psych_1 = next_psych_level(entry, step, direction)
    psych_2 = next_psych_level(psych_1, step, direction)

    candidates: dict[float, str] = {}
    _collect(structural_prices, "structure", tick, candidates)
    _collect((psych_1, psych_2), "psych", tick, candidates)

    tp1 = _nearest_beyond(candidates, entry, direction)
    if tp1 is None:
        return None
    tp2 = _nearest_beyond(candidates, tp1, direction)
    if tp2 is None:
        return None

    return TargetSet(
        tp1=tp1,
        tp2=tp2,
        tp1_source=candidates[tp1],
        tp2_source=candidates[tp2],
    )


def extend_targets(
    direction: str,
    targets: TargetSet,
    htf_prices: Iterable[float],
    tick: float,
) -> Optional[TargetSet]:
    """Shift the target ladder out by one rung using higher-timeframe swings.

    The old TP2 becomes TP1, and the nearest higher-timeframe swing
    strictly beyond it becomes TP2.  Returns ``None`` if no such swing
    exists.
    """
    _check_direction(direction)
    candidates: dict[float, str] = {}
    _collect(htf_prices, "htf", tick, candidates)
    tp2 = _nearest_beyond(candidates, targets.tp2, direction)
    if tp2 is None:
        return None
    return TargetSet(
        tp1=targets.tp2,
        tp2=tp2,
        tp1_source=targets.tp2_source,
        tp2_source="htf",
    )


def enforce_ordering(
    direction: str,
    entry: float,
    stop: float,
    tp1: float,
    tp2: float,
    tick: float,
) -> tuple[float, float, float, float]:
    """Guarantee ``stop < entry < tp1 < tp2`` (LONG) or the SHORT mirror.

    All levels are tick-rounded first; any level that collides with or
    crosses its neighbour is pushed one tick outward (away from entry).

    Returns:
        ``(entry, stop, tp1, tp2)``.
    """
    _check_direction(direction)
    sign = 1 if direction == "LONG" else -1
    entry, stop, tp1, tp2 = (round_to_tick(p, tick) for p in (entry, stop, tp1, tp2))

    def _step(price: float, ticks: int) -> float:
        return round_to_tick(price + sign * ticks * tick, tick)

    if not _beyond(entry, stop, direction):
        stop = _step(entry, -1)
    if not _beyond(tp1, entry, direction):
        tp1 = _step(entry, 1)
    if not _beyond(tp2, tp1, direction):
        tp2 = _step(tp1, 1)
    return entry, stop, tp1, tp2


def risk_reward(direction: str, entry: float, stop: float, target: float) -> Optional[Decimal]:
    """Exact reward-to-risk ratio, or ``None`` when risk is not positive."""
    _check_direction(direction)
    d_entry, d_stop, d_target = (Decimal(repr(float(p))) for p in (entry, stop, target))
    if direction == "LONG":
        risk, reward = d_entry - d_stop, d_target - d_entry
    else:
        risk, reward = d_stop - d_entry, d_entry - d_target
    if risk <= 0:
        return None
    return reward / risk


def format_ratio(ratio: Optional[Decimal]) -> str:
    """``Decimal("2.47")`` → ``"1:2.5"``; ``None`` → ``"N/A"``."""
    if ratio is None:
        return "N/A"
    return f"1:{ratio:.1f}"
