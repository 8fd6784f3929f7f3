"""Zone parsing — pure functions, no I/O.

Swing zones arrive as free text ("155.70-155.85", "1,0850", "42500 - 43000").
These helpers pull numeric bounds out of that text.  Anything that cannot be
read is reported as ``None`` and treated as absent data, never as zero.
"""

import math
import re
from typing import Optional

from structurekit.strategy.models import Swing


# Comma-grouped thousands ("42,500", "1,234.5") are tried first.  Otherwise
# a single comma or dot followed by digits is a decimal separator ("1,0850").
_THOUSANDS_RE = re.compile(r"\d{1,3}(?:,\d{3}(?!\d))+(?:\.\d+)?")
_NUMBER_RE = re.compile(_THOUSANDS_RE.pattern + r"|\d+(?:[.,]\d+)?")


def _numbers(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return _NUMBER_RE.findall(text)


def _normalise(token: str) -> str:
    """Rewrite a matched token with a dot decimal point and no grouping."""
    if _THOUSANDS_RE.fullmatch(token):
        return token.replace(",", "")
    return token.replace(",", ".")


def parse_zone(text: Optional[str]) -> Optional[tuple[float, float]]:
    """Extract a ``(low, high)`` price range from a free-text zone.

    The first two numbers found are used.  A single number yields a
    degenerate range ``(x, x)``.

    Returns:
        Ordered ``(low, high)`` tuple, or ``None`` if no finite number
        could be read.
    """
    values: list[float] = []
    for token in _numbers(text)[:2]:
        value = float(_normalise(token))
        if math.isfinite(value):
            values.append(value)
    if not values:
        return None
    return min(values), max(values)


def zone_midpoint(text: Optional[str]) -> Optional[float]:
    """Midpoint of a parsed zone, or ``None``."""
    bounds = parse_zone(text)
    if bounds is None:
        return None
    low, high = bounds
    return (low + high) / 2.0


def decimal_places(text: Optional[str]) -> Optional[int]:
    """Largest count of digits after a decimal point among numbers in *text*.

    Returns ``0`` when numbers are present but none has a fractional part,
    and ``None`` when there is no number at all.
    """
    tokens = _numbers(text)
    if not tokens:
        return None
    places = 0
    for token in tokens:
        normalised = _normalise(token)
        if "." in normalised:
            places = max(places, len(normalised.split(".", 1)[1]))
    return places


def swing_price(swing: Optional[Swing]) -> Optional[float]:
    """Numeric price of a swing.

    The explicit ``price`` wins; otherwise the midpoint of the zone text.
    """
    if swing is None:
        return None
    if swing.price is not None and math.isfinite(swing.price):
        return float(swing.price)
    return zone_midpoint(swing.zone)


def numeric_swing_prices(swings) -> list[float]:
    """Prices of every swing that has one, oldest-first."""
    prices: list[float] = []
    for swing in swings:
        price = swing_price(swing)
        if price is not None:
            prices.append(price)
    return prices
