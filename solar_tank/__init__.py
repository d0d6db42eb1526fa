"""Solar water-heating simulation: irradiance → panel → storage tank."""

from .params import SimulationParams, ConfigurationError, SECTIONS, PARAMETER_INFO
from .irradiance import solar_irradiance
from .components import (
    panel_efficiency, panel_temperature, panel_output, tank_heat_loss,
    SolarPanel, SolarPanelParams, StorageTank, StorageTankParams, PanelState,
)
from .series import Series
from .simulation import (
    simulate_solar_irradiance, simulate_solar_panel, simulate_storage_tank,
    run_simulation, run_all, daily_summary, TankSimulation,
)

__version__ = "0.1.0"
