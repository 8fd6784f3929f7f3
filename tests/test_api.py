"""Tests for the HTTP API — analysis, top-down, position sizing and demos."""

import pytest
from fastapi.testclient import TestClient

from structurekit.api.routers import configure_routers
from structurekit.api.schemas import parse_chart_state
from structurekit.config import Settings
from structurekit.main import app

client = TestClient(app)


# ── Helpers ──────────────────────────────────────────────────────────────


def _make_payload(**overrides) -> dict:
    """Raw chart_state JSON for a bullish BoS + retest that emits a LONG."""
    payload = {
        "pair": "USD/XYZ",
        "timeframe": "1H",
        "trend_hint": "bullish",
        "swings": [
            {"type": "SwingLow", "label": "S1", "zone": "119.20"},
            {"type": "SwingHigh", "label": "H1", "zone": "119.45"},
            {"type": "SwingLow", "label": "S2", "zone": "119.30"},
            {"type": "SwingHigh", "label": "H2", "zone": "119.50"},
        ],
        "breaks": [{"type": "bos", "confirmed": True}],
        "range": {"hasRange": False},
        "chop_detected": False,
        "retest_present": True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def _default_settings():
    configure_routers(None)
    yield
    configure_routers(None)


# ── Schemas ──────────────────────────────────────────────────────────────


class TestParseChartState:
    def test_converts_to_frozen_state(self):
        state = parse_chart_state(_make_payload(current_price=119.40))
        assert state.current_price == 119.40
        assert state.swings[3].label == "H2"
        assert state.breaks[0].confirmed is True
        assert state.range.has_range is False

    def test_range_accepts_snake_case(self):
        state = parse_chart_state(_make_payload(range={"has_range": True, "top_zone": "1.09"}))
        assert state.range.has_range is True
        assert state.range.top_zone == "1.09"

    def test_rejects_unknown_swing_type(self):
        from pydantic import ValidationError

        payload = _make_payload(swings=[{"type": "Peak", "label": "P", "zone": "1.0"}])
        with pytest.raises(ValidationError):
            parse_chart_state(payload)


# ── Endpoints ────────────────────────────────────────────────────────────


class TestHealth:
    def test_health(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestAnalyzeEndpoint:
    def test_returns_analysis_record(self):
        resp = client.post("/analyze", json=_make_payload())
        assert resp.status_code == 200
        data = resp.json()
        assert data["meta"]["pair"] == "USD/XYZ"
        assert data["bias"]["state"] == "Bullish"
        signal = data["sniper_plan"]["entry_signal"]
        assert signal["direction"] == "LONG"
        assert signal["entry_price"] == 119.52
        assert signal["risk_reward_ratio"] == "1:2.0"

    def test_missing_required_field_is_422(self):
        payload = _make_payload()
        del payload["trend_hint"]
        resp = client.post("/analyze", json=payload)
        assert resp.status_code == 422

    def test_bad_enum_is_422(self):
        resp = client.post("/analyze", json=_make_payload(trend_hint="sideways"))
        assert resp.status_code == 422

    def test_uses_configured_settings(self):
        configure_routers(Settings(min_risk_reward=2.01))
        resp = client.post("/analyze", json=_make_payload())
        signal = resp.json()["sniper_plan"]["entry_signal"]
        assert signal["direction"] == "WAIT"
        assert signal["wait_reason"] == "RR_BELOW_FLOOR"
        assert signal["entry_price"] is None


class TestTopDownEndpoint:
    def test_frames_and_execution_timeframe(self):
        htf = _make_payload(timeframe="D", price_region="121.00")
        resp = client.post("/analyze/top-down", json={"states": [htf, _make_payload()]})
        assert resp.status_code == 200
        data = resp.json()
        assert data["meta"]["timeframe"] == "1H"
        assert [f["timeframe"] for f in data["top_down"]] == ["D", "1H"]
        assert data["top_down"][0]["key_level"] == "121.00"

    def test_empty_states_is_422(self):
        resp = client.post("/analyze/top-down", json={"states": []})
        assert resp.status_code == 422


class TestPositionSizeEndpoint:
    def test_sizes_position(self):
        resp = client.post(
            "/position-size",
            json={"balance": 10_000, "risk_pct": 1.0, "entry_price": 1.1, "stop_loss": 1.097},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["risk_amount"] == pytest.approx(100.0)
        assert data["units"] == 33_333

    def test_flat_stop_is_422(self):
        resp = client.post(
            "/position-size",
            json={"balance": 10_000, "entry_price": 1.1, "stop_loss": 1.1},
        )
        assert resp.status_code == 422
        assert "must differ" in resp.json()["detail"]


class TestDemoEndpoint:
    def test_demo_analysis(self):
        resp = client.get("/demo/3")
        assert resp.status_code == 200
        data = resp.json()
        assert data["meta"]["pair"] == "XAU/USD"
        assert data["meta"]["source"] == "Demo Mode (no API call)"
        assert data["sniper_plan"]["entry_signal"]["direction"] == "LONG"

    def test_unknown_demo_is_404(self):
        resp = client.get("/demo/9")
        assert resp.status_code == 404
