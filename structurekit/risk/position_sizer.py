"""Position sizing — pure math, no I/O.

Sizes a trade so that hitting the stop loses a fixed percentage of the
account balance.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PositionSize:
    """Result of a position-size calculation."""

    risk_amount: float
    pips_at_risk: float
    lots: float
    units: int
    notional: float  # in quote currency


def calculate_position_size(
    balance: float,
    risk_pct: float,
    entry_price: float,
    stop_loss: float,
    pip_size: float = 0.0001,
    pip_value_per_lot: float = 10.0,
    contract_size: float = 100_000.0,
) -> PositionSize:
    """Calculate lot size for a fixed-fraction risk budget.

    Formula::

        risk_amount   = balance × (risk_pct / 100)
        pips_at_risk  = |entry − stop| / pip_size
        lots          = risk_amount / (pips_at_risk × pip_value_per_lot)
        units         = lots × contract_size

    Args:
        balance: Account balance (e.g. 10_000.0).
        risk_pct: Percentage of balance to risk (e.g. 1.0 for 1 %).
        entry_price: Planned entry.
        stop_loss: Planned stop.
        pip_size: Price value of one pip (0.0001 majors, 0.01 JPY).
        pip_value_per_lot: Account-currency value of one pip per lot.
        contract_size: Units per standard lot.

    Returns:
        ``PositionSize`` (units rounded to the nearest whole unit).

    Raises:
        ValueError: If any input is non-finite or non-positive, or entry
            and stop coincide.
    """
    inputs = {
        "balance": balance,
        "risk_pct": risk_pct,
        "entry_price": entry_price,
        "stop_loss": stop_loss,
        "pip_size": pip_size,
        "pip_value_per_lot": pip_value_per_lot,
        "contract_size": contract_size,
    }
    for name, value in inputs.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")
    if risk_pct > 100:
        raise ValueError(f"risk_pct must be at most 100, got {risk_pct}")

    distance = abs(entry_price - stop_loss)
    if distance == 0:
        raise ValueError("entry_price and stop_loss must differ")

    risk_amount = balance * (risk_pct / 100.0)
    pips_at_risk = distance / pip_size
    lots = risk_amount / (pips_at_risk * pip_value_per_lot)
    units = lots * contract_size

    return PositionSize(
        risk_amount=risk_amount,
        pips_at_risk=pips_at_risk,
        lots=lots,
        units=round(units),
        notional=units * entry_price,
    )
