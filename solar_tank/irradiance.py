"""
Daily solar irradiance profile.

A single clear day is modeled as a cosine bump across the daylight window,
peaking at the configured hour and zero outside sunrise..sunset.
"""

import numpy as np

from .params import SimulationParams


def daylight_fraction(t: float, start_hour: float, end_hour: float) -> float:
    """
    Position of time ``t`` within the daylight window (0 at sunrise, 1 at sunset).
    A zero-width window gives nan/inf rather than raising.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(t - start_hour) / (end_hour - start_hour))


def solar_irradiance(t: float, params: SimulationParams) -> float:
    """
    Irradiance on the collector at time of day ``t`` (hours).

    Args:
        t: Time of day in hours. Not wrapped; values outside [0, 24) are the
           caller's concern.
        params: Simulation parameters (irradiance window and peak)

    Returns:
        Irradiance in W/m², never negative (nan for a degenerate window)
    """
    start = params.irradiance_start_hour
    end = params.irradiance_end_hour

    if not start <= t <= end:
        return 0.0

    offset = (daylight_fraction(t, start, end)
              - daylight_fraction(params.irradiance_peak_hour, start, end))
    with np.errstate(invalid='ignore'):
        irradiance = params.solar_irradiance_peak * np.cos(offset * np.pi)

    # Cosine tail goes negative when the peak is off-centre
    return float(np.maximum(0.0, irradiance))


def irradiance_profile(times, params: SimulationParams) -> np.ndarray:
    """Irradiance evaluated at each time in ``times``."""
    return np.array([solar_irradiance(float(t), params) for t in times])
