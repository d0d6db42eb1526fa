"""
Component library for a solar water-heating installation.

System architecture:
  [Irradiance] → [Solar Panel] → heat in → [Storage Tank] → heat loss → [Ambient]

The panel is solved at equilibrium for every instant (no thermal mass); the
tank carries the only state, a single well-mixed temperature.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Optional

import numpy as np

from .params import SimulationParams, MIN_EFFICIENCY


WATER_SPECIFIC_HEAT = 4186.0    # J/(kg·K)
EQUILIBRIUM_ITERATIONS = 10


# ============================================================================
# BASE CLASS
# ============================================================================

class Component(ABC):
    """Base class for all system components"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def update(self, dt: float, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update component state for one timestep.

        Args:
            dt: Time step in seconds
            inputs: Dictionary of input values from connected components

        Returns:
            Dictionary of output values for other components
        """
        pass

    @abstractmethod
    def get_state(self) -> Dict[str, Any]:
        """Return current component state for monitoring/logging"""
        pass

    def reset(self):
        """Reset component to initial state"""
        pass


# ============================================================================
# SOLAR PANEL PHYSICS
# ============================================================================

def _divide(numerator: float, denominator: float) -> float:
    """IEEE division: a zero denominator gives inf/nan instead of raising."""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(numerator) / denominator)


def panel_efficiency(panel_temp: float, efficiency_ref: float,
                     ref_temp: float = 25.0, temp_coefficient: float = 0.004) -> float:
    """
    Temperature-dependent collector efficiency.

    Degrades linearly above the reference temperature and is clamped to
    [0.1, efficiency_ref]: never better than rated, never below 10%.
    """
    efficiency = efficiency_ref * (1 - temp_coefficient * (panel_temp - ref_temp))
    return float(np.maximum(MIN_EFFICIENCY, np.minimum(efficiency, efficiency_ref)))


def panel_temperature(irradiance: float, ambient_temp: float, area: float,
                      efficiency_ref: float, u_value: float,
                      ref_temp: float = 25.0, temp_coefficient: float = 0.004,
                      iterations: int = EQUILIBRIUM_ITERATIONS,
                      tolerance: Optional[float] = None) -> float:
    """
    Panel equilibrium temperature.

    Solves  irradiance * A * eta(T) = U * A * (T - T_ambient)  by fixed-point
    iteration seeded at ambient. Without ``tolerance`` exactly ``iterations``
    passes are made; with it, iteration stops once successive estimates agree
    within ``tolerance`` and ``iterations`` is only the cap.

    Returns:
        Panel temperature (°C); ambient when there is no irradiance
    """
    if irradiance <= 0:
        return ambient_temp

    T_panel = ambient_temp
    for _ in range(iterations):
        efficiency = panel_efficiency(T_panel, efficiency_ref, ref_temp, temp_coefficient)
        solar_collected = irradiance * area * efficiency
        T_next = ambient_temp + _divide(solar_collected, u_value * area)

        converged = tolerance is not None and abs(T_next - T_panel) < tolerance
        T_panel = T_next
        if converged:
            break

    return T_panel


def reference_panel_temperature(irradiance: float, ambient_temp: float, area: float,
                                efficiency_ref: float, u_value: float) -> float:
    """Single-pass equilibrium estimate at rated efficiency (used by the tank loop)."""
    if irradiance <= 0:
        return ambient_temp
    return ambient_temp + _divide(irradiance * area * efficiency_ref, u_value * area)


def panel_heat_loss(panel_temp: float, ambient_temp: float, area: float, u_value: float) -> float:
    """Heat lost from the panel surface to ambient air (W)."""
    return u_value * area * (panel_temp - ambient_temp)


def panel_output(irradiance: float, panel_temp: float, tank_temp: float, ambient_temp: float,
                 area: float, u_value: float = 5.0, efficiency_ref: float = 0.70,
                 ref_temp: float = 25.0, temp_coefficient: float = 0.004) -> float:
    """
    Heat delivered from the panel to the tank (W).

    Returns the solar energy collected at the panel's actual efficiency. The
    surface loss (see ``panel_heat_loss``) is NOT subtracted; downstream
    results depend on this value. ``tank_temp`` is accepted for interface
    symmetry and does not affect the result.
    """
    efficiency = panel_efficiency(panel_temp, efficiency_ref, ref_temp, temp_coefficient)
    solar_collected = irradiance * area * efficiency
    return float(np.maximum(0.0, solar_collected))


@dataclass
class PanelState:
    """Instantaneous panel solution. Recomputed per query, never stored across runs."""
    temperature: float      # °C
    efficiency: float       # fraction
    heat_output: float      # W delivered to tank
    heat_loss: float        # W lost from panel surface (diagnostic)


@dataclass
class SolarPanelParams:
    """Parameters for a flat-plate solar thermal collector."""
    area: float = 2.0                 # m²
    efficiency_ref: float = 0.70      # fraction at ref_temp
    u_value: float = 10.0             # W/(m²·K) — surface loss to ambient
    ref_temp: float = 25.0            # °C
    temp_coefficient: float = 0.004   # fraction per °C
    max_temp: float = 80.0            # °C — display cap only

    @classmethod
    def from_simulation(cls, params: SimulationParams) -> 'SolarPanelParams':
        return cls(
            area=params.panel_area,
            efficiency_ref=params.panel_efficiency_ref,
            u_value=params.panel_u_value,
            ref_temp=params.panel_ref_temp,
            temp_coefficient=params.panel_temp_coefficient,
            max_temp=params.panel_max_temp,
        )


class SolarPanel(Component):
    """
    Solar thermal collector solved at equilibrium.
    No thermal mass: every update is a fresh solve of the energy balance.
    """

    def __init__(self, name: str, params: SolarPanelParams):
        super().__init__(name)
        self.params = params
        self.last: Optional[PanelState] = None

    def solve(self, irradiance: float, T_ambient: float,
              T_tank: Optional[float] = None, tolerance: Optional[float] = None) -> PanelState:
        """Equilibrium temperature, efficiency, heat output and surface loss."""
        p = self.params
        T_panel = panel_temperature(irradiance, T_ambient, p.area, p.efficiency_ref,
                                    p.u_value, p.ref_temp, p.temp_coefficient,
                                    tolerance=tolerance)
        efficiency = panel_efficiency(T_panel, p.efficiency_ref, p.ref_temp, p.temp_coefficient)
        Q_out = panel_output(irradiance, T_panel,
                             T_ambient if T_tank is None else T_tank, T_ambient,
                             p.area, p.u_value, p.efficiency_ref, p.ref_temp, p.temp_coefficient)
        Q_loss = panel_heat_loss(T_panel, T_ambient, p.area, p.u_value)

        self.last = PanelState(T_panel, efficiency, Q_out, Q_loss)
        return self.last

    def update(self, dt: float, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Solve the panel for the current instant.

        Inputs expected:
            - irradiance: Solar irradiance (W/m²)
            - T_ambient: Ambient temperature (°C)
            - T_tank: Tank temperature (°C) [optional]
        """
        state = self.solve(inputs.get('irradiance', 0.0),
                           inputs.get('T_ambient', 20.0),
                           inputs.get('T_tank'))
        return {
            'T_panel': state.temperature,
            'efficiency': state.efficiency,
            'Q_out': state.heat_output,
            'Q_loss': state.heat_loss,
        }

    def get_state(self) -> Dict[str, Any]:
        state = {'area': self.params.area}
        if self.last is not None:
            state['T_panel'] = self.last.temperature
            state['efficiency'] = self.last.efficiency
        return state

    def reset(self):
        super().reset()
        self.last = None


# ============================================================================
# STORAGE TANK COMPONENT
# ============================================================================

def tank_heat_loss(tank_temp: float, ambient_temp: float,
                   surface_area: float, u_value: float) -> float:
    """
    Heat lost from the tank to ambient, Q = U * A * (T_tank - T_ambient).
    Never negative: the tank does not gain heat from colder surroundings here.
    """
    return float(np.maximum(0.0, u_value * surface_area * (tank_temp - ambient_temp)))


@dataclass
class StorageTankParams:
    """
    Parameters for an insulated, fully mixed hot-water tank.
    Mass is taken equal to volume (1 L of water ≈ 1 kg).
    """
    volume: float = 200.0                        # L
    surface_area: float = 2.0                    # m²
    heat_loss_coef: float = 0.5                  # W/(m²·K)
    specific_heat: float = WATER_SPECIFIC_HEAT   # J/(kg·K)

    @property
    def mass(self) -> float:
        return self.volume

    @classmethod
    def from_simulation(cls, params: SimulationParams) -> 'StorageTankParams':
        return cls(
            volume=params.tank_volume,
            surface_area=params.tank_surface_area,
            heat_loss_coef=params.tank_insulation_u_value,
        )


class StorageTank(Component):
    """
    Insulated storage tank with a single mixed temperature.

    The temperature is floored at ambient after every step: the model has no
    mechanism that would cool the water below its surroundings.
    """

    def __init__(self, name: str, params: StorageTankParams, initial_temp: float = 20.0):
        super().__init__(name)
        self.params = params
        self.initial_temp = initial_temp
        self.T_tank = initial_temp

    def update(self, dt: float, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Advance the tank by one energy-balance step.

        Inputs expected:
            - Q_in: Heat delivered by the panel (W)
            - T_ambient: Ambient temperature (°C)
        """
        Q_in = inputs.get('Q_in', 0.0)
        T_ambient = inputs.get('T_ambient', 20.0)

        Q_loss = tank_heat_loss(self.T_tank, T_ambient,
                                self.params.surface_area, self.params.heat_loss_coef)

        # ΔT = Q_net * dt / (m * cp)
        dT = _divide((Q_in - Q_loss) * dt, self.params.mass * self.params.specific_heat)
        self.T_tank = float(np.maximum(T_ambient, self.T_tank + dT))

        return {
            'T_tank': self.T_tank,
            'Q_in': Q_in,
            'Q_loss': Q_loss,
            'dT': dT,
        }

    def get_state(self) -> Dict[str, Any]:
        return {
            'T_tank': self.T_tank,
            'volume': self.params.volume,
            'mass': self.params.mass,
        }

    def reset(self):
        super().reset()
        self.T_tank = self.initial_temp
