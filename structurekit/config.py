"""StructureKit — application configuration.

Loads .env variables into a typed settings object.
The analysis core takes a ``Settings`` argument and never reads the
environment itself; only the CLI and API boundary call ``load_settings``.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


# Confluence gate (inclusive); not read from the environment.
MIN_CONFLUENCE = 75

DEFAULT_MIN_RISK_REWARD = 2.0
DEFAULT_SOURCE_LABEL = "TradingView screenshot"


@dataclass(frozen=True)
class Settings:
    """Typed settings loaded from environment variables."""

    min_risk_reward: float = DEFAULT_MIN_RISK_REWARD
    log_level: str = "INFO"
    api_port: int = 8080
    source_label: str = DEFAULT_SOURCE_LABEL


def _read_float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None


def _read_int(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


def load_settings(env_path: str | None = None) -> Settings:
    """Load settings from environment variables.

    Every variable is optional.  Raises ``ValueError`` naming the variable
    when a value cannot be parsed or is out of range.
    """
    load_dotenv(dotenv_path=env_path)

    min_rr = _read_float("STRUCTUREKIT_MIN_RISK_REWARD", str(DEFAULT_MIN_RISK_REWARD))
    if min_rr <= 0:
        raise ValueError(
            f"STRUCTUREKIT_MIN_RISK_REWARD must be positive, got {min_rr}"
        )

    return Settings(
        min_risk_reward=min_rr,
        log_level=os.environ.get("STRUCTUREKIT_LOG_LEVEL", "INFO").upper(),
        api_port=_read_int("STRUCTUREKIT_API_PORT", "8080"),
        source_label=os.environ.get("STRUCTUREKIT_SOURCE_LABEL", DEFAULT_SOURCE_LABEL),
    )
