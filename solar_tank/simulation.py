"""
Simulation drivers.

Each driver sweeps one day and returns a list of labeled Series for the
presentation layer. Drivers keep no state between calls: the same parameters
always give identical output.

    simulate_solar_irradiance  — half-hour irradiance profile
    simulate_solar_panel       — half-hour panel temperature / efficiency / output
    simulate_storage_tank      — 10 s energy-balance integration, sampled hourly
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Any, List, Mapping, Optional, Union

import numpy as np

from .params import SimulationParams, ConfigurationError, SECTIONS
from .irradiance import solar_irradiance
from .components import (
    SolarPanel, SolarPanelParams,
    StorageTank, StorageTankParams,
    panel_output, reference_panel_temperature,
)
from .series import Series

logger = logging.getLogger(__name__)

ParamsLike = Union[SimulationParams, Mapping[str, Any]]

HOURS_IN_DAY = 24
PROFILE_STEP_HOURS = 0.5

# Series colours (HSL hints for the charting front end)
COLORS = dict(
    irradiance = 'hsl(44, 100%, 50%)',
    temp       = 'hsl(0, 100%, 50%)',
    ambient    = 'hsl(0, 60%, 50%)',
    efficiency = 'hsl(120, 100%, 50%)',
    heat_in    = 'hsl(120, 100%, 50%)',
    heat       = 'hsl(210, 100%, 50%)',
)

PANEL_SOLVERS = ('reference', 'iterative')


@dataclass(frozen=True)
class TankSimulation:
    """Integration settings for the tank run."""
    dt: float = 10.0                  # s — internal step
    duration_hours: float = 24.0      # h
    sample_interval: float = 3600.0   # s — reporting cadence
    panel_solver: str = 'reference'   # panel temperature per step, see PANEL_SOLVERS

    def __post_init__(self):
        if self.dt <= 0 or self.duration_hours <= 0:
            raise ConfigurationError("dt and duration_hours must be positive")
        if self.sample_interval < self.dt:
            raise ConfigurationError("sample_interval must be at least one step (dt)")
        if self.panel_solver not in PANEL_SOLVERS:
            raise ConfigurationError(
                f"panel_solver must be one of {PANEL_SOLVERS}, got '{self.panel_solver}'")

    @property
    def num_steps(self) -> int:
        return int(self.duration_hours * 3600 // self.dt)

    @property
    def steps_per_sample(self) -> int:
        return int(self.sample_interval // self.dt)


def _resolve(params: ParamsLike, validate: bool) -> SimulationParams:
    if isinstance(params, SimulationParams):
        return params.validate() if validate else params
    return SimulationParams.from_mapping(params, validate=validate)


def _profile_hours() -> np.ndarray:
    return np.arange(0.0, HOURS_IN_DAY, PROFILE_STEP_HOURS)


def _tank_settings(settings: Optional[TankSimulation],
                   panel_solver: Optional[str]) -> TankSimulation:
    settings = settings or TankSimulation()
    if panel_solver is not None:
        settings = replace(settings, panel_solver=panel_solver)
    return settings


# ============================================================================
# IRRADIANCE
# ============================================================================

def simulate_solar_irradiance(params: ParamsLike, validate: bool = True) -> List[Series]:
    """Irradiance over one day at half-hour resolution."""
    params = _resolve(params, validate)

    irradiance = Series('Solar Irradiance', color=COLORS['irradiance'])
    for t in _profile_hours():
        irradiance.append(t, solar_irradiance(t, params))

    return [irradiance]


# ============================================================================
# SOLAR PANEL
# ============================================================================

def simulate_solar_panel(params: ParamsLike, validate: bool = True) -> List[Series]:
    """
    Panel temperature, efficiency and heat output over one day.

    The panel is solved at equilibrium with ambient for each half hour.
    Temperature is capped at ``panel_max_temp`` for display only; efficiency
    and output use the uncapped solution.
    """
    params = _resolve(params, validate)
    panel = SolarPanel('SolarPanel', SolarPanelParams.from_simulation(params))
    T_amb = params.ambient_temp

    temp = Series('Panel Temperature (°C)', color=COLORS['temp'])
    ambient = Series('Ambient Temperature (°C)', color=COLORS['ambient'], dashed=True)
    efficiency = Series('Panel Efficiency (%)', color=COLORS['efficiency'])
    output = Series('Heat Output (W)', color=COLORS['heat'])

    for t in _profile_hours():
        state = panel.solve(solar_irradiance(t, params), T_amb)

        temp.append(t, np.minimum(state.temperature, params.panel_max_temp))
        ambient.append(t, T_amb)
        efficiency.append(t, state.efficiency * 100)
        output.append(t, state.heat_output)

    return [temp, ambient, efficiency, output]


# ============================================================================
# STORAGE TANK
# ============================================================================

def _integrate_tank(params: SimulationParams, settings: TankSimulation):
    """
    Run the tank energy balance; return sampled series and run totals.

    Energy totals are accumulated per integration step (Q * dt), so
    energy_in - energy_lost matches the stored-heat change exactly when the
    ambient floor never binds.
    """
    panel = SolarPanel('SolarPanel', SolarPanelParams.from_simulation(params))
    tank = StorageTank('StorageTank', StorageTankParams.from_simulation(params),
                       initial_temp=params.initial_tank_temp)
    p = panel.params
    T_amb = params.ambient_temp
    dt = settings.dt
    every = settings.steps_per_sample

    heat_in = Series('Heat In (W)', color=COLORS['heat_in'])
    heat_loss = Series('Heat Loss (W)', color=COLORS['heat'])
    tank_temp = Series('Tank Temperature (°C)', color=COLORS['temp'])
    ambient = Series('Ambient Temperature (°C)', color=COLORS['ambient'], dashed=True)

    # Initial sample: configured temperature, no heat flow yet
    tank_temp.append(0, params.initial_tank_temp)
    heat_in.append(0, 0)
    heat_loss.append(0, 0)
    ambient.append(0, T_amb)

    E_in = 0.0
    E_loss = 0.0
    T_max = tank.T_tank

    logger.info("Simulating storage tank: %d steps of %.0f s (%s panel solver)",
                settings.num_steps - 1, dt, settings.panel_solver)

    for i in range(1, settings.num_steps):
        t_h = i * dt / 3600
        irr = solar_irradiance(t_h, params)

        if settings.panel_solver == 'iterative':
            T_panel = panel.solve(irr, T_amb, tank.T_tank).temperature
        else:
            T_panel = reference_panel_temperature(irr, T_amb, p.area, p.efficiency_ref, p.u_value)

        Q_panel = panel_output(irr, T_panel, tank.T_tank, T_amb, p.area, p.u_value,
                               p.efficiency_ref, p.ref_temp, p.temp_coefficient)
        out = tank.update(dt, {'Q_in': Q_panel, 'T_ambient': T_amb})

        E_in += out['Q_in'] * dt
        E_loss += out['Q_loss'] * dt
        T_max = max(T_max, out['T_tank'])

        if i % every == 0:
            tank_temp.append(t_h, out['T_tank'])
            heat_in.append(t_h, out['Q_in'])
            heat_loss.append(t_h, out['Q_loss'])
            ambient.append(t_h, T_amb)

    totals = {
        'energy_in_kwh': E_in / 3.6e6,
        'energy_lost_kwh': E_loss / 3.6e6,
        'final_tank_temp': tank.T_tank,
        'max_tank_temp': T_max,
    }
    logger.debug("Tank run finished: final %.2f °C, max %.2f °C, %.3f kWh in",
                 totals['final_tank_temp'], totals['max_tank_temp'], totals['energy_in_kwh'])

    return [heat_in, heat_loss, tank_temp, ambient], totals


def simulate_storage_tank(params: ParamsLike, panel_solver: Optional[str] = None,
                          settings: Optional[TankSimulation] = None,
                          validate: bool = True) -> List[Series]:
    """
    Tank temperature and heat flows over one day.

    Integrates the tank energy balance with a fixed 10 s step and reports once
    per simulated hour plus an initial point at midnight. ``panel_solver``
    picks how the panel temperature is found at each step: ``'reference'``
    (single pass at rated efficiency) or ``'iterative'`` (full equilibrium solve). It overrides the solver held by ``settings``.
    """
    params = _resolve(params, validate)
    series, _ = _integrate_tank(params, _tank_settings(settings, panel_solver))
    return series


# ============================================================================
# DISPATCH
# ============================================================================

SIMULATIONS = {
    'solarIrradiance': simulate_solar_irradiance,
    'solarPanel': simulate_solar_panel,
    'storageTank': simulate_storage_tank,
}


# The general section has no chart of its own and shows the irradiance run
SECTION_DRIVERS = dict(SIMULATIONS, simulationParameters=simulate_solar_irradiance)


def run_simulation(section: str, params: ParamsLike) -> List[Series]:
    """Run the driver behind a UI section id."""
    if section not in SECTION_DRIVERS:
        raise KeyError(f"No simulation for section '{section}'")
    return SECTION_DRIVERS[section](params)


def run_all(params: ParamsLike) -> Dict[str, List[Series]]:
    """
    Run every driver on one parameter set.
    Results are only returned once all have completed.
    """
    params = _resolve(params, validate=True)
    return {section: driver(params) for section, driver in SIMULATIONS.items()}


def daily_summary(params: ParamsLike, panel_solver: Optional[str] = None,
                  settings: Optional[TankSimulation] = None) -> Dict[str, float]:
    """
    Headline numbers for one day.

    Energy totals come from the tank integration (per 10 s step); the peaks
    come from the half-hour panel sweep.

    Returns:
        Dict with energy_in_kwh, energy_lost_kwh, final_tank_temp,
        max_tank_temp, tank_temp_rise, peak_irradiance, peak_panel_temp
    """
    params = _resolve(params, validate=True)
    _, totals = _integrate_tank(params, _tank_settings(settings, panel_solver))

    panel = SolarPanel('SolarPanel', SolarPanelParams.from_simulation(params))
    hours = _profile_hours()
    irradiance = [solar_irradiance(t, params) for t in hours]
    peak_panel = max(panel.solve(irr, params.ambient_temp).temperature for irr in irradiance)

    summary = dict(totals)
    summary['tank_temp_rise'] = totals['final_tank_temp'] - params.initial_tank_temp
    summary['peak_irradiance'] = max(irradiance)
    summary['peak_panel_temp'] = peak_panel
    return summary


__all__ = [
    'TankSimulation', 'PANEL_SOLVERS', 'SIMULATIONS', 'SECTION_DRIVERS', 'SECTIONS',
    'simulate_solar_irradiance', 'simulate_solar_panel', 'simulate_storage_tank',
    'run_simulation', 'run_all', 'daily_summary',
]
