"""API routers — /analyze, /analyze/top-down, /position-size, /demo endpoints.

No business logic.  Validates input, delegates to the engine, and returns
the analysis record as JSON.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from structurekit.api.schemas import (
    ChartStateModel,
    PositionSizeRequest,
    PositionSizeResponse,
    TopDownRequest,
)
from structurekit.config import Settings
from structurekit.demo import DEMO_CHART_STATES, get_demo_state
from structurekit.engine import analyze_multi, build_analysis
from structurekit.risk.position_sizer import calculate_position_size

logger = logging.getLogger("structurekit")
router = APIRouter()

_settings: Optional[Settings] = None  # Set via configure_routers()


def configure_routers(settings: Optional[Settings] = None) -> None:
    """Inject settings from the application startup.

    Passing ``None`` restores the defaults.
    """
    global _settings  # noqa: PLW0603
    _settings = settings


def _current_settings() -> Settings:
    return _settings or Settings()


@router.post("/analyze")
async def analyze(payload: ChartStateModel):
    """Analyse a single chart state."""
    state = payload.to_chart_state()
    result = build_analysis(state, settings=_current_settings())
    signal = result.sniper_plan.entry_signal
    logger.info(
        "Analysed %s %s: bias=%s signal=%s",
        result.meta.pair, result.meta.timeframe,
        result.bias.state, signal.direction if signal else "none",
    )
    return result.to_dict()


@router.post("/analyze/top-down")
async def analyze_top_down(payload: TopDownRequest):
    """Analyse several timeframes; the last chart is the execution frame."""
    states = [s.to_chart_state() for s in payload.states]
    result = analyze_multi(states, settings=_current_settings())
    logger.info(
        "Top-down analysis of %d frame(s) for %s: bias=%s",
        len(states), result.meta.pair, result.bias.state,
    )
    return result.to_dict()


@router.post("/position-size", response_model=PositionSizeResponse)
async def position_size(payload: PositionSizeRequest):
    """Size a position for a given entry/stop and risk budget."""
    try:
        size = calculate_position_size(**payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return PositionSizeResponse(
        risk_amount=size.risk_amount,
        pips_at_risk=size.pips_at_risk,
        lots=size.lots,
        units=size.units,
        notional=size.notional,
    )


@router.get("/demo/{index}")
async def demo(index: int):
    """Analysis of a bundled demo chart."""
    if not 0 <= index < len(DEMO_CHART_STATES):
        raise HTTPException(
            status_code=404,
            detail=f"Unknown demo {index}; available: 0-{len(DEMO_CHART_STATES) - 1}",
        )
    settings = _current_settings()
    result = build_analysis(get_demo_state(index), settings=settings)
    data = result.to_dict()
    data["meta"]["source"] = "Demo Mode (no API call)"
    return data
