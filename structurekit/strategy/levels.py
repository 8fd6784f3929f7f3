"""Key-level extraction from the most recent swings."""

from structurekit.models.analysis import KeyLevel
from structurekit.strategy.models import ChartState


RESISTANCE_RATIONALE = "Potential resistance and invalidation for longs"
SUPPORT_RATIONALE = "Potential support and invalidation for shorts"


def extract_key_levels(state: ChartState) -> list[KeyLevel]:
    """Return at most one resistance and one support level.

    The *latest* swing high and swing low are used (list order, not price
    extremes).  No swings → empty list.
    """
    levels: list[KeyLevel] = []

    latest_high = state.last_high
    if latest_high is not None:
        levels.append(KeyLevel(
            name=latest_high.label or "Recent swing high",
            zone=latest_high.zone,
            why_it_matters=RESISTANCE_RATIONALE,
        ))

    latest_low = state.last_low
    if latest_low is not None:
        levels.append(KeyLevel(
            name=latest_low.label or "Recent swing low",
            zone=latest_low.zone,
            why_it_matters=SUPPORT_RATIONALE,
        ))

    return levels
