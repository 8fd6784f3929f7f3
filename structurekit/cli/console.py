"""CLI console output — prints an analysis summary."""

from typing import Optional

from structurekit.models.analysis import AnalysisResult
from structurekit.risk.ticks import format_price


def _fmt(value: Optional[float], tick: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return format_price(value, tick) if tick else f"{value}"


def print_analysis(result: AnalysisResult) -> str:
    """Format and print a human-readable analysis summary.

    Returns:
        The formatted string (also printed to stdout).
    """
    plan = result.sniper_plan
    signal = plan.entry_signal

    lines = [
        "──────────────── StructureKit Analysis ────────────────",
        f"  Pair:            {result.meta.pair} ({result.meta.timeframe})",
        f"  Bias:            {result.bias.state} ({result.bias.reason})",
        f"  Confidence:      {result.confidence.score}/100 ({result.confidence.explanation})",
        f"  Plan:            {plan.type}",
    ]
    for level in result.key_levels:
        lines.append(f"  Key level:       {level.name} @ {level.zone}")

    if signal is not None:
        tick = signal.tick_size
        lines += [
            f"  Signal:          {signal.direction} [{signal.signal_quality}]"
            f" {signal.pattern_type}",
            f"  Confluence:      {signal.confluence_score}/100",
            f"  Entry:           {_fmt(signal.entry_price, tick)}",
            f"  Stop:            {_fmt(signal.stop_loss, tick)}",
            f"  TP1 / TP2:       {_fmt(signal.take_profit_1, tick)}"
            f" / {_fmt(signal.take_profit_2, tick)}",
            f"  R:R:             {signal.risk_reward_ratio}",
            f"  Rationale:       {signal.rationale}",
        ]
        if not signal.is_actionable:
            lines.append(f"  Wait reason:     {signal.wait_reason}")

    for note in result.risk_notes:
        lines.append(f"  Note:            {note}")
    lines.append("───────────────────────────────────────────────────────")

    output = "\n".join(lines)
    print(output)
    return output
