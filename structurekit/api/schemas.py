"""Request/response schemas — the validation boundary.

Raw JSON (from the vision collaborator, the manual-input form or the CLI)
is validated here and converted into the core's frozen dataclasses.  The
core never re-validates primitive shapes.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat

from structurekit.strategy.models import (
    BiasState,
    Break,
    BreakType,
    ChartState,
    RangeInfo,
    Swing,
    SwingType,
    TopDownFrame,
    TrendHint,
)


class SwingModel(BaseModel):
    type: SwingType
    label: str
    zone: str
    price: Optional[FiniteFloat] = None


class BreakModel(BaseModel):
    type: BreakType
    confirmed: bool
    description: Optional[str] = None


class RangeModel(BaseModel):
    """Range block; keys are camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    has_range: bool = Field(alias="hasRange")
    top_zone: Optional[str] = Field(default=None, alias="topZone")
    bottom_zone: Optional[str] = Field(default=None, alias="bottomZone")
    false_breaks: Optional[bool] = Field(default=None, alias="falseBreaks")


class TopDownFrameModel(BaseModel):
    timeframe: str
    bias: Union[TrendHint, BiasState]
    key_level: Optional[str] = None
    narrative: Optional[str] = None


class ChartStateModel(BaseModel):
    """Chart state as produced by the vision collaborator."""

    pair: Optional[str] = None
    timeframe: Optional[str] = None
    current_price: Optional[FiniteFloat] = None
    price_region: Optional[str] = None
    trend_hint: TrendHint
    swings: list[SwingModel]
    breaks: list[BreakModel]
    range: RangeModel
    chop_detected: Optional[bool] = None
    retest_present: Optional[bool] = None
    notes: Optional[str] = None
    top_down: Optional[list[TopDownFrameModel]] = None

    def to_chart_state(self) -> ChartState:
        """Build an independent, frozen ``ChartState`` from this payload."""
        return ChartState(
            pair=self.pair,
            timeframe=self.timeframe,
            current_price=self.current_price,
            price_region=self.price_region,
            trend_hint=self.trend_hint,
            swings=tuple(
                Swing(type=s.type, label=s.label, zone=s.zone, price=s.price)
                for s in self.swings
            ),
            breaks=tuple(
                Break(type=b.type, confirmed=b.confirmed, description=b.description)
                for b in self.breaks
            ),
            range=RangeInfo(
                has_range=self.range.has_range,
                top_zone=self.range.top_zone,
                bottom_zone=self.range.bottom_zone,
                false_breaks=self.range.false_breaks,
            ),
            chop_detected=self.chop_detected,
            retest_present=self.retest_present,
            notes=self.notes,
            top_down=tuple(
                TopDownFrame(
                    timeframe=f.timeframe,
                    bias=f.bias,
                    key_level=f.key_level,
                    narrative=f.narrative,
                )
                for f in self.top_down or ()
            ),
        )


class TopDownRequest(BaseModel):
    """Several charts of one instrument, highest timeframe first."""

    states: list[ChartStateModel] = Field(min_length=1)


class PositionSizeRequest(BaseModel):
    balance: FiniteFloat
    risk_pct: FiniteFloat = 1.0
    entry_price: FiniteFloat
    stop_loss: FiniteFloat
    pip_size: FiniteFloat = 0.0001
    pip_value_per_lot: FiniteFloat = 10.0
    contract_size: FiniteFloat = 100_000.0


class PositionSizeResponse(BaseModel):
    risk_amount: float
    pips_at_risk: float
    lots: float
    units: int
    notional: float


def parse_chart_state(payload: dict) -> ChartState:
    """Validate a raw dict and return the core ``ChartState``.

    Raises:
        pydantic.ValidationError: If the payload is malformed.
    """
    return ChartStateModel.model_validate(payload).to_chart_state()
