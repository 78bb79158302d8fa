"""
Simplified Standard Atmosphere
==============================
Density, pressure and temperature ratios of the lower atmosphere as a
function of geometric altitude, plus dynamic viscosity of air from
Sutherland's formula.

Two layers are modelled:
  - Troposphere (h < 11 km): linear temperature lapse, power-law pressure
  - Stratosphere (h >= 11 km): isothermal, exponential pressure decay

Correct to about 20 km. Above that the values are only approximate, but
no error is raised.

All ratios are relative to sea-level standard values.
"""

import numpy as np


# ── Atmosphere Constants ──────────────────────────────────────────────────
EARTH_RADIUS_KM      = 6369.0      # km
GMR                  = 34.163195   # hydrostatic constant, K/km
SEA_LEVEL_TEMP       = 288.15      # K  (15 °C)
TROPOPAUSE_TEMP      = 216.65      # K  (-56.5 °C)
TROPOPAUSE_ALT_KM    = 11.0        # km (geopotential)
TROPOPAUSE_DELTA     = 0.2233611   # pressure ratio at 11 km
LAPSE_RATE_KM        = -6.5        # K/km (troposphere)

# ── Sutherland's law ──────────────────────────────────────────────────────
VISCOSITY_BETA       = 1.458e-6    # kg/(m·s·sqrt(K))
SUTHERLAND_CONSTANT  = 110.4       # K


def geopotential_altitude(alt_km: float) -> float:
    """Convert geometric altitude (km) to geopotential altitude (km)."""
    return alt_km * EARTH_RADIUS_KM / (alt_km + EARTH_RADIUS_KM)


def simple_atmosphere(alt_km: float):
    """
    Atmosphere ratios at a given geometric altitude.

    Parameters
    ----------
    alt_km : float
        Geometric altitude in kilometers. Negative values (below sea
        level) are accepted.

    Returns
    -------
    (sigma, delta, theta) : tuple of float
        sigma = density / sea-level density
        delta = pressure / sea-level pressure
        theta = temperature / sea-level temperature
    """
    h = geopotential_altitude(alt_km)
    if h < TROPOPAUSE_ALT_KM:
        theta = 1.0 + (LAPSE_RATE_KM / SEA_LEVEL_TEMP) * h
        delta = theta ** (GMR / -LAPSE_RATE_KM)
    else:
        theta = TROPOPAUSE_TEMP / SEA_LEVEL_TEMP
        delta = TROPOPAUSE_DELTA * np.exp(
            -GMR * (h - TROPOPAUSE_ALT_KM) / TROPOPAUSE_TEMP
        )
    sigma = delta / theta
    return float(sigma), float(delta), float(theta)


def viscosity(theta: float) -> float:
    """
    Dynamic viscosity of air (kg/(m·s)) from Sutherland's formula.

    theta is the temperature ratio returned by simple_atmosphere.
    """
    temp = SEA_LEVEL_TEMP * theta
    return VISCOSITY_BETA * temp ** 1.5 / (temp + SUTHERLAND_CONSTANT)


# ── Vectorized version for plotting ───────────────────────────────────────
def atmosphere_profile(alt_km_array: np.ndarray,
                       sea_level_density: float = 1.2250) -> dict:
    """
    Compute the atmosphere for an array of altitudes (km).
    Returns dict with keys: 'altitude', 'sigma', 'delta', 'theta',
    'density', 'temperature', 'viscosity'.
    """
    alt_km_array = np.asarray(alt_km_array, dtype=float)
    ratios = np.array([simple_atmosphere(h) for h in alt_km_array])
    if ratios.size == 0:
        ratios = np.empty((0, 3))
    sigma, delta, theta = ratios[:, 0], ratios[:, 1], ratios[:, 2]
    return {
        'altitude': alt_km_array,
        'sigma': sigma,
        'delta': delta,
        'theta': theta,
        'density': sigma * sea_level_density,
        'temperature': theta * SEA_LEVEL_TEMP,
        'viscosity': np.array([viscosity(t) for t in theta]),
    }
