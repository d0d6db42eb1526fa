"""
Simulation parameters for the solar water-heating model.

A single flat, immutable parameter set drives every simulation run. Values are
SI with units implied by the name (hours, W/m², m², °C, W/(m²·K), litres).
"""

import logging
import math
from dataclasses import dataclass, asdict, fields, replace as dc_replace
from typing import Dict, Any, Mapping

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a parameter set cannot produce a physically meaningful run."""


# ============================================================================
# PARAMETER SET
# ============================================================================

@dataclass(frozen=True)
class SimulationParams:
    """
    Flat parameter set for one simulation run.

    Defaults describe a small domestic installation: a 2 m² collector feeding
    a 200 L tank on a clear 12-hour day.
    """
    # Simulation
    ambient_temp: float = 20.0              # °C
    mass_flow_rate: float = 0.05            # kg/s — carried for the UI, not used by the physics

    # Solar irradiance
    irradiance_start_hour: float = 6.0      # h — sunrise
    irradiance_end_hour: float = 18.0       # h — sunset
    irradiance_peak_hour: float = 12.0      # h — solar noon
    solar_irradiance_peak: float = 800.0    # W/m²

    # Solar panel
    panel_area: float = 2.0                 # m²
    panel_efficiency_ref: float = 0.70      # fraction at reference temperature
    panel_max_temp: float = 80.0            # °C — display cap
    panel_u_value: float = 10.0             # W/(m²·K)
    panel_ref_temp: float = 25.0            # °C
    panel_temp_coefficient: float = 0.004   # fraction per °C

    # Storage tank
    tank_volume: float = 200.0              # L (1 L ≈ 1 kg)
    initial_tank_temp: float = 20.0         # °C
    tank_surface_area: float = 2.0          # m²
    tank_insulation_u_value: float = 0.5    # W/(m²·K)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], validate: bool = True) -> 'SimulationParams':
        """
        Build a parameter set from a flat mapping.

        Keys may be field names (``panel_u_value``) or the camelCase names used
        by the web front end (``panelUValue``). Missing keys take defaults.
        """
        values: Dict[str, float] = {}
        for key, value in mapping.items():
            name = CAMEL_TO_FIELD.get(key, key)
            if name not in FIELD_NAMES:
                raise ConfigurationError(f"Unknown parameter '{key}'")
            try:
                values[name] = float(value)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"Parameter '{key}' must be numeric, got {value!r}"
                ) from exc

        params = cls(**values)
        if validate:
            params.validate()
        return params

    def replace(self, **changes) -> 'SimulationParams':
        """Return a copy with the given fields changed."""
        return dc_replace(self, **changes)

    def to_dict(self, camel_case: bool = False) -> Dict[str, float]:
        data = asdict(self)
        if camel_case:
            return {FIELD_TO_CAMEL[k]: v for k, v in data.items()}
        return data

    def validate(self) -> 'SimulationParams':
        """
        Check the parameter set and raise ConfigurationError on the first problem.

        Guards the divisions in the irradiance profile (zero-width daylight
        window), the panel equilibrium (zero area or U-value) and the tank
        energy balance (zero thermal mass).
        """
        try:
            self._check()
        except ConfigurationError as exc:
            logger.warning("Rejected simulation parameters: %s", exc)
            raise
        return self

    def _check(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{f.name} must be finite, got {value}")

        start, end = self.irradiance_start_hour, self.irradiance_end_hour
        if start >= end:
            raise ConfigurationError(
                f"irradiance_start_hour ({start}) must be before irradiance_end_hour ({end})"
            )
        if not start <= self.irradiance_peak_hour <= end:
            raise ConfigurationError(
                f"irradiance_peak_hour ({self.irradiance_peak_hour}) must lie within "
                f"[{start}, {end}]"
            )

        for name in ('panel_area', 'panel_u_value', 'tank_volume', 'tank_surface_area',
                     'tank_insulation_u_value'):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")

        if self.solar_irradiance_peak < 0:
            raise ConfigurationError(
                f"solar_irradiance_peak must not be negative, got {self.solar_irradiance_peak}"
            )
        if not MIN_EFFICIENCY <= self.panel_efficiency_ref <= 1.0:
            raise ConfigurationError(
                f"panel_efficiency_ref must lie within [{MIN_EFFICIENCY}, 1.0], "
                f"got {self.panel_efficiency_ref}"
            )


# Efficiency floor shared with the panel model
MIN_EFFICIENCY = 0.1

FIELD_NAMES = frozenset(f.name for f in fields(SimulationParams))

FIELD_TO_CAMEL = {
    'ambient_temp':            'ambientTemp',
    'mass_flow_rate':          'massFlowRate',
    'irradiance_start_hour':   'irradianceStartHour',
    'irradiance_end_hour':     'irradianceEndHour',
    'irradiance_peak_hour':    'irradiancePeakHour',
    'solar_irradiance_peak':   'solarIrradiancePeak',
    'panel_area':              'panelArea',
    'panel_efficiency_ref':    'panelEfficiencyRef',
    'panel_max_temp':          'panelMaxTemp',
    'panel_u_value':           'panelUValue',
    'panel_ref_temp':          'panelRefTemp',
    'panel_temp_coefficient':  'panelTempCoefficient',
    'tank_volume':             'tankVolume',
    'initial_tank_temp':       'initialTankTemp',
    'tank_surface_area':       'tankSurfaceArea',
    'tank_insulation_u_value': 'tankInsulationUValue',
}

CAMEL_TO_FIELD = {camel: name for name, camel in FIELD_TO_CAMEL.items()}


# ============================================================================
# SECTIONS & PARAMETER METADATA (consumed by the demo UI)
# ============================================================================

SECTIONS: Dict[str, Dict[str, Any]] = {
    'simulationParameters': {
        'title': 'Simulation Parameters',
        'parameters': ('ambient_temp', 'mass_flow_rate'),
        'dependencies': (),
    },
    'solarIrradiance': {
        'title': 'Solar Irradiance',
        'parameters': ('irradiance_start_hour', 'irradiance_end_hour',
                       'irradiance_peak_hour', 'solar_irradiance_peak'),
        'dependencies': (),
    },
    'solarPanel': {
        'title': 'Solar Panel',
        'parameters': ('panel_area', 'panel_efficiency_ref', 'panel_max_temp',
                       'panel_u_value', 'panel_ref_temp', 'panel_temp_coefficient'),
        'dependencies': ('solarIrradiance', 'simulationParameters'),
    },
    'storageTank': {
        'title': 'Storage Tank',
        'parameters': ('tank_volume', 'initial_tank_temp',
                       'tank_surface_area', 'tank_insulation_u_value'),
        'dependencies': ('solarPanel', 'simulationParameters'),
    },
}

PARAMETER_INFO: Dict[str, Dict[str, str]] = {
    'irradiance_start_hour': {
        'label': 'Start Hour (h)',
        'description': 'Hour of day when solar irradiance becomes non-zero (sunrise).',
    },
    'irradiance_end_hour': {
        'label': 'End Hour (h)',
        'description': 'Hour of day when solar irradiance returns to zero (sunset).',
    },
    'irradiance_peak_hour': {
        'label': 'Peak Hour (h)',
        'description': 'Hour of day at which irradiance reaches its maximum (solar noon).',
    },
    'solar_irradiance_peak': {
        'label': 'Peak Solar Irradiance (W/m²)',
        'description': 'Maximum irradiance during the day. About 1000 W/m² at sea level on a clear day.',
    },
    'panel_area': {
        'label': 'Panel Area (m²)',
        'description': 'Collector surface area. Larger area collects more energy.',
    },
    'panel_efficiency_ref': {
        'label': 'Panel Efficiency',
        'description': 'Efficiency at the reference temperature, as a fraction.',
    },
    'panel_max_temp': {
        'label': 'Max Panel Temp (°C)',
        'description': 'Upper limit used when plotting panel temperature.',
    },
    'panel_u_value': {
        'label': 'Panel U-Value (W/m²·K)',
        'description': 'Heat transfer coefficient between the panel surface and ambient air.',
    },
    'panel_ref_temp': {
        'label': 'Reference Temp (°C)',
        'description': 'Temperature at which the reference efficiency is rated. Standard test condition is 25 °C.',
    },
    'panel_temp_coefficient': {
        'label': 'Temp Coefficient (1/°C)',
        'description': 'Fractional efficiency loss per °C above the reference temperature. Typical: 0.004.',
    },
    'tank_volume': {
        'label': 'Tank Volume (L)',
        'description': 'Water volume of the storage tank.',
    },
    'initial_tank_temp': {
        'label': 'Initial Tank Temp (°C)',
        'description': 'Tank temperature at midnight, the start of the run.',
    },
    'tank_surface_area': {
        'label': 'Tank Surface Area (m²)',
        'description': 'Exposed tank surface used for heat loss to ambient.',
    },
    'tank_insulation_u_value': {
        'label': 'Tank U-Value (W/m²·K)',
        'description': 'Overall heat transfer coefficient of the tank insulation. Lower is better insulated.',
    },
    'mass_flow_rate': {
        'label': 'Mass Flow Rate (kg/s)',
        'description': 'Collector loop circulation rate. Informational only in this model.',
    },
    'ambient_temp': {
        'label': 'Ambient Temperature (°C)',
        'description': 'Surrounding air temperature for both panel and tank heat loss.',
    },
}
