"""
Smoke tests for the Streamlit demo
Runs app.py headless and checks the KPI row against the library summary
"""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from solar_tank.params import SimulationParams
from solar_tank.simulation import daily_summary

APP = str(Path(__file__).resolve().parent.parent / "app.py")


def _metrics(at):
    return {m.label: m.value for m in at.metric}


@pytest.fixture
def app():
    at = AppTest.from_file(APP, default_timeout=60)
    at.run()
    assert not at.exception
    return at


class TestDashboard:

    def test_kpis_match_daily_summary(self, app):
        summary = daily_summary(SimulationParams())
        metrics = _metrics(app)
        assert metrics["Heat Collected"] == f"{summary['energy_in_kwh']:.2f} kWh"
        assert metrics["Peak Panel Temp"] == f"{summary['peak_panel_temp']:.1f} °C"

    def test_summary_follows_parameter_change(self, app):
        app.slider(key="tank_volume").set_value(500.0).run()
        assert not app.exception

        summary = daily_summary(SimulationParams(tank_volume=500.0))
        assert _metrics(app)["Tank Heat Loss"] == f"{summary['energy_lost_kwh']:.2f} kWh"

    def test_insulation_slider_starts_above_zero(self, app):
        assert app.slider(key="tank_insulation_u_value").min > 0.0
