"""Tick size and psychological levels — pure math, no I/O.

The engine never knows the instrument's contract details; it infers the
smallest meaningful increment from whatever the chart state offers:

    1. pair hint      "JPY" in the pair  → 0.01
    2. price region   digits after the decimal point (0–8) → 10^-d
    3. magnitude      reference price < 10 → 0.0001, otherwise 0.01
    4. default        0.0001

All rounding goes through ``decimal.Decimal`` so computed levels are exact
multiples of the tick and format with the tick's precision.
"""

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Literal, Optional

from structurekit.strategy.zones import decimal_places


DEFAULT_TICK = 0.0001
JPY_TICK = 0.01
JPY_PSYCH_STEP = 0.50
MAX_DECIMALS = 8

# (minimum price, round-number step), checked top-down.
PSYCH_BANDS: tuple[tuple[float, float], ...] = (
    (10_000.0, 100.0),
    (1_000.0, 50.0),
    (100.0, 10.0),
    (10.0, 5.0),
)
SUB_TEN_PSYCH_STEP = 0.0050

RoundMode = Literal["nearest", "ceil", "floor"]
_ROUNDING = {
    "nearest": ROUND_HALF_UP,
    "ceil": ROUND_CEILING,
    "floor": ROUND_FLOOR,
}


def _dec(value: float) -> Decimal:
    return Decimal(repr(float(value)))


def is_jpy_pair(pair: Optional[str]) -> bool:
    return bool(pair) and "JPY" in pair.upper()


def derive_tick_size(
    pair: Optional[str] = None,
    price_region: Optional[str] = None,
    reference_price: Optional[float] = None,
) -> float:
    """Infer the rounding granularity for computed price levels.

    Args:
        pair: Instrument name, e.g. ``"GBP/JPY"`` or ``"EURUSD"``.
        price_region: Free-text price region, e.g. ``"155.70-155.85"``.
        reference_price: Current (or best-known) price.

    Returns:
        Tick size as a float power of ten.
    """
    if is_jpy_pair(pair):
        return JPY_TICK

    places = decimal_places(price_region)
    if places is not None:
        places = max(0, min(MAX_DECIMALS, places))
        return float(Decimal(1).scaleb(-places))

    if reference_price is not None and reference_price > 0:
        return 0.0001 if reference_price < 10 else 0.01

    return DEFAULT_TICK


def tick_decimals(tick: float) -> int:
    """Number of decimals implied by *tick* (0.0001 → 4, 1 → 0)."""
    exponent = _dec(tick).normalize().as_tuple().exponent
    return max(0, -exponent)


def round_to_tick(price: float, tick: float, mode: RoundMode = "nearest") -> float:
    """Round *price* to a multiple of *tick*.

    Raises:
        ValueError: If *tick* is not positive or *mode* is unknown.
    """
    if tick <= 0:
        raise ValueError(f"tick must be positive, got {tick}")
    if mode not in _ROUNDING:
        raise ValueError(f"mode must be 'nearest', 'ceil' or 'floor', got '{mode}'")
    d_tick = _dec(tick)
    steps = (_dec(price) / d_tick).to_integral_value(rounding=_ROUNDING[mode])
    quantum = Decimal(1).scaleb(-tick_decimals(tick))
    return float((steps * d_tick).quantize(quantum))


def offset_price(
    price: float,
    offset: float,
    tick: float,
    mode: RoundMode = "nearest",
) -> float:
    """``price + offset`` computed in decimal, then rounded to the tick."""
    return round_to_tick(float(_dec(price) + _dec(offset)), tick, mode)


def format_price(price: float, tick: float) -> str:
    """Format *price* with exactly the tick's precision."""
    return f"{price:.{tick_decimals(tick)}f}"


def psych_step(
    pair: Optional[str],
    reference_price: Optional[float],
    tick: float,
) -> float:
    """Round-number spacing used as a secondary target magnet.

    JPY quotes use 0.50.  Otherwise the step is banded by price
    magnitude (100 / 50 / 10 / 5 for higher-priced instruments, 0.0050
    below 10).  The step is never finer than the tick.
    """
    if is_jpy_pair(pair):
        step = JPY_PSYCH_STEP
    elif reference_price is None or reference_price <= 0:
        step = SUB_TEN_PSYCH_STEP
    else:
        step = SUB_TEN_PSYCH_STEP
        for floor_price, band_step in PSYCH_BANDS:
            if reference_price >= floor_price:
                step = band_step
                break
    return max(step, tick)


def next_psych_level(price: float, step: float, direction: str) -> float:
    """First multiple of *step* strictly beyond *price* in *direction*.

    Args:
        direction: ``"LONG"`` (above) or ``"SHORT"`` (below).

    Raises:
        ValueError: If *direction* is not ``"LONG"`` or ``"SHORT"``.
    """
    d_step = _dec(step)
    ratio = _dec(price) / d_step
    if direction == "LONG":
        steps = ratio.to_integral_value(rounding=ROUND_FLOOR) + 1
    elif direction == "SHORT":
        steps = ratio.to_integral_value(rounding=ROUND_CEILING) - 1
    else:
        raise ValueError(f"direction must be 'LONG' or 'SHORT', got '{direction}'")
    return float(steps * d_step)
