"""
Unit tests for the solar panel and storage tank components
Validates efficiency limits, equilibrium solving and the tank energy balance
"""

import pytest
import numpy as np

from solar_tank.components import (
    WATER_SPECIFIC_HEAT,
    panel_efficiency, panel_temperature, reference_panel_temperature,
    panel_output, panel_heat_loss,
    SolarPanel, SolarPanelParams,
    tank_heat_loss, StorageTank, StorageTankParams,
)


# Analytic equilibrium for the default panel at 800 W/m², 20 °C ambient:
#   T = 20 + 56 * (1 - 0.004 * (T - 25))  =>  1.224 T = 81.6
T_EQUILIBRIUM = 81.6 / 1.224


def _panel_args(**overrides):
    """Default collector: 2 m², 70% rated, U = 10 W/(m²·K)."""
    defaults = dict(
        irradiance=800.0, ambient_temp=20.0, area=2.0,
        efficiency_ref=0.70, u_value=10.0,
        ref_temp=25.0, temp_coefficient=0.004,
    )
    defaults.update(overrides)
    return defaults


def _small_tank(initial_temp=20.0, **overrides):
    """200 L domestic tank with typical insulation."""
    defaults = dict(volume=200.0, surface_area=2.0, heat_loss_coef=0.5)
    defaults.update(overrides)
    return StorageTank("Test", StorageTankParams(**defaults), initial_temp=initial_temp)


# ============================================================================
# PANEL EFFICIENCY
# ============================================================================

class TestPanelEfficiency:

    def test_reference_temperature_gives_rated_efficiency(self):
        assert panel_efficiency(25.0, 0.70, 25.0, 0.004) == 0.70

    def test_linear_degradation_above_reference(self):
        # 50 °C above reference: 0.70 * (1 - 0.2)
        assert panel_efficiency(75.0, 0.70) == pytest.approx(0.56)

    def test_capped_at_rated_below_reference(self):
        assert panel_efficiency(-10.0, 0.70) == 0.70

    def test_floor_at_ten_percent(self):
        assert panel_efficiency(1000.0, 0.70) == 0.1

    def test_bounds_across_temperature_range(self):
        for T in np.linspace(-50.0, 500.0, 221):
            eta = panel_efficiency(T, 0.65, 25.0, 0.005)
            assert 0.1 <= eta <= 0.65


# ============================================================================
# PANEL EQUILIBRIUM
# ============================================================================

class TestPanelTemperature:

    def test_no_irradiance_is_ambient(self):
        assert panel_temperature(**_panel_args(irradiance=0.0, ambient_temp=13.7)) == 13.7

    def test_negative_irradiance_is_ambient(self):
        assert panel_temperature(**_panel_args(irradiance=-5.0)) == 20.0

    def test_converges_to_energy_balance(self):
        T = panel_temperature(**_panel_args())
        assert abs(T - T_EQUILIBRIUM) < 1e-4

        # Absorbed equals lost at the solution
        eta = panel_efficiency(T, 0.70)
        assert 800.0 * 2.0 * eta == pytest.approx(10.0 * 2.0 * (T - 20.0), rel=1e-5)

    def test_fixed_iteration_count_reproduced(self):
        """Default mode is exactly ten passes seeded at ambient"""
        T = 20.0
        for _ in range(10):
            T = 20.0 + 800.0 * 2.0 * panel_efficiency(T, 0.70) / (10.0 * 2.0)
        assert panel_temperature(**_panel_args()) == T

    def test_iteration_count_matters(self):
        assert panel_temperature(**_panel_args(), iterations=1) == pytest.approx(76.0)
        assert panel_temperature(**_panel_args(), iterations=2) != panel_temperature(**_panel_args())

    def test_tolerance_mode_stops_early(self):
        """A loose tolerance stops as soon as successive estimates agree"""
        loose = panel_temperature(**_panel_args(), tolerance=50.0)
        assert loose == panel_temperature(**_panel_args(), iterations=2)

    def test_tolerance_mode_tight(self):
        T = panel_temperature(**_panel_args(), iterations=200, tolerance=1e-12)
        assert T == pytest.approx(T_EQUILIBRIUM, abs=1e-10)

    def test_reference_estimate_uses_rated_efficiency(self):
        assert reference_panel_temperature(800.0, 20.0, 2.0, 0.70, 10.0) == pytest.approx(76.0)
        assert reference_panel_temperature(0.0, 20.0, 2.0, 0.70, 10.0) == 20.0

    def test_reference_estimate_hotter_than_equilibrium(self):
        assert reference_panel_temperature(800.0, 20.0, 2.0, 0.70, 10.0) > panel_temperature(**_panel_args())

    def test_zero_u_value_gives_infinite_temperature(self):
        assert panel_temperature(**_panel_args(u_value=0.0)) == np.inf
        assert reference_panel_temperature(800.0, 20.0, 2.0, 0.70, 0.0) == np.inf
        assert panel_efficiency(np.inf, 0.70) == pytest.approx(0.1)

    def test_nan_irradiance_propagates(self):
        assert np.isnan(panel_temperature(**_panel_args(irradiance=np.nan)))
        assert np.isnan(panel_output(np.nan, 25.0, 40.0, 20.0, 2.0))


# ============================================================================
# PANEL OUTPUT
# ============================================================================

class TestPanelOutput:

    def test_returns_collected_energy(self):
        """Surface loss is not subtracted from the delivered heat"""
        T = 60.0
        expected = 800.0 * 2.0 * panel_efficiency(T, 0.70)
        assert panel_output(800.0, T, 40.0, 20.0, 2.0, 10.0, 0.70) == expected

    def test_tank_temperature_has_no_effect(self):
        a = panel_output(800.0, 60.0, 20.0, 20.0, 2.0, 10.0, 0.70)
        b = panel_output(800.0, 60.0, 90.0, 20.0, 2.0, 10.0, 0.70)
        assert a == b

    def test_floored_at_zero(self):
        assert panel_output(-100.0, 20.0, 20.0, 20.0, 2.0, 10.0, 0.70) == 0.0
        assert panel_output(0.0, 20.0, 20.0, 20.0, 2.0, 10.0, 0.70) == 0.0

    def test_heat_loss_diagnostic(self):
        assert panel_heat_loss(60.0, 20.0, 2.0, 10.0) == 800.0


class TestSolarPanelComponent:

    def test_solve_state(self):
        panel = SolarPanel("Test", SolarPanelParams())
        state = panel.solve(800.0, 20.0)

        assert abs(state.temperature - T_EQUILIBRIUM) < 1e-4
        assert state.efficiency == panel_efficiency(state.temperature, 0.70)
        assert state.heat_output == pytest.approx(800.0 * 2.0 * state.efficiency)
        # At equilibrium the diagnostic loss balances what was collected
        assert state.heat_loss == pytest.approx(state.heat_output, rel=1e-4)

    def test_night_state(self):
        panel = SolarPanel("Test", SolarPanelParams())
        state = panel.solve(0.0, 15.0)
        assert state.temperature == 15.0
        assert state.heat_output == 0.0
        assert state.heat_loss == 0.0
        assert state.efficiency == 0.70

    def test_update_interface(self):
        panel = SolarPanel("Test", SolarPanelParams())
        result = panel.update(10.0, {'irradiance': 800.0, 'T_ambient': 20.0, 'T_tank': 40.0})

        assert set(result) == {'T_panel', 'efficiency', 'Q_out', 'Q_loss'}
        assert panel.get_state()['T_panel'] == result['T_panel']

        panel.reset()
        assert 'T_panel' not in panel.get_state()


# ============================================================================
# STORAGE TANK
# ============================================================================

class TestTankHeatLoss:

    def test_loss_value(self):
        assert tank_heat_loss(60.0, 20.0, 2.0, 0.5) == 40.0

    def test_no_gain_from_warmer_ambient(self):
        assert tank_heat_loss(15.0, 20.0, 2.0, 0.5) == 0.0

    def test_zero_at_ambient(self):
        assert tank_heat_loss(20.0, 20.0, 2.0, 0.5) == 0.0


class TestStorageTankEnergyBalance:

    def test_mass_equals_volume(self):
        assert StorageTankParams(volume=150.0).mass == 150.0

    def test_single_step_heating(self):
        tank = _small_tank()
        result = tank.update(10.0, {'Q_in': 1000.0, 'T_ambient': 20.0})

        expected_dT = 1000.0 * 10.0 / (200.0 * WATER_SPECIFIC_HEAT)
        assert result['dT'] == pytest.approx(expected_dT)
        assert result['T_tank'] == pytest.approx(20.0 + expected_dT)
        assert result['Q_loss'] == 0.0

    def test_loss_uses_temperature_before_step(self):
        tank = _small_tank(initial_temp=60.0)
        result = tank.update(10.0, {'Q_in': 0.0, 'T_ambient': 20.0})
        assert result['Q_loss'] == 40.0
        assert result['T_tank'] < 60.0

    def test_large_thermal_mass_damps_response(self):
        small = _small_tank().update(10.0, {'Q_in': 1000.0, 'T_ambient': 20.0})
        large = _small_tank(volume=1e6).update(10.0, {'Q_in': 1000.0, 'T_ambient': 20.0})

        assert large['dT'] < 1e-5
        assert small['dT'] / large['dT'] == pytest.approx(1e6 / 200.0)

    def test_never_cools_below_ambient(self):
        """Large loss would overshoot past ambient in one step; floor holds"""
        tank = _small_tank(initial_temp=20.5, surface_area=50.0, heat_loss_coef=100.0, volume=1.0)
        result = tank.update(10.0, {'Q_in': 0.0, 'T_ambient': 20.0})
        assert result['dT'] < -0.5
        assert tank.T_tank == 20.0

    def test_decays_toward_ambient(self):
        tank = _small_tank(initial_temp=60.0, heat_loss_coef=5.0, surface_area=4.0)
        temps = []
        for _ in range(int(7 * 24 * 3600 / 10)):
            temps.append(tank.update(10.0, {'Q_in': 0.0, 'T_ambient': 20.0})['T_tank'])

        assert all(b <= a for a, b in zip(temps, temps[1:]))
        assert min(temps) >= 20.0
        assert temps[-1] - 20.0 < 0.01

    def test_reset_restores_initial(self):
        tank = _small_tank(initial_temp=35.0)
        tank.update(10.0, {'Q_in': 5000.0, 'T_ambient': 20.0})
        assert tank.T_tank > 35.0

        tank.reset()
        assert tank.T_tank == 35.0
        assert tank.get_state()['T_tank'] == 35.0

    def test_zero_mass_goes_non_finite(self):
        tank = _small_tank(volume=0.0)
        tank.update(10.0, {'Q_in': 100.0, 'T_ambient': 20.0})
        assert tank.T_tank == np.inf

        still = _small_tank(volume=0.0)
        out = still.update(10.0, {'Q_in': 0.0, 'T_ambient': 20.0})
        assert np.isnan(out['dT'])
        assert np.isnan(still.T_tank)

    def test_reset_after_non_finite_state(self):
        tank = _small_tank(volume=0.0, initial_temp=30.0)
        tank.update(10.0, {'Q_in': 0.0, 'T_ambient': 20.0})
        tank.reset()
        assert tank.T_tank == 30.0
        assert '_state' not in vars(tank)
