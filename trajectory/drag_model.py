"""
Sphere Drag Model
=================
Drag coefficient of a smooth sphere as a function of Reynolds number.
Mach number is assumed small enough that wave drag can be neglected.

Piecewise fit taken from Chow, "Computational Aerodynamics":

    Re <= 0          Cd = 0
    Re <= 1          Cd = 24 / Re            (Stokes flow)
    Re <= 400        Cd = 24 Re^-0.646
    Re <= 3e5        Cd = 0.5                (Newton plateau)
    Re <= 2e6        Cd = 3.66e-4 Re^0.4275  (drag crisis recovery)
    otherwise        Cd = 0.18

Each band includes its upper limit, so a Reynolds number sitting exactly
on a limit always uses the lower band's formula.
"""

import numpy as np


# Upper limit of each band, in evaluation order
REYNOLDS_BANDS = (0.0, 1.0, 400.0, 3e5, 2e6)


def cd_sphere(reynolds: float) -> float:
    """Return the drag coefficient of a sphere at the given Reynolds number."""
    if reynolds <= 0.0:
        return 0.0
    elif reynolds <= 1.0:
        return 24.0 / reynolds
    elif reynolds <= 400.0:
        return 24.0 * reynolds ** -0.646
    elif reynolds <= 3e5:
        return 0.5
    elif reynolds <= 2e6:
        return 3.66e-4 * reynolds ** 0.4275
    return 0.18


def cd_sphere_array(reynolds_array: np.ndarray) -> np.ndarray:
    """Vectorized Cd lookup, band for band identical to cd_sphere."""
    re = np.asarray(reynolds_array, dtype=float)
    safe = np.where(re > 0.0, re, 1.0)
    conditions = [
        re <= 0.0,
        re <= 1.0,
        re <= 400.0,
        re <= 3e5,
        re <= 2e6,
    ]
    choices = [
        np.zeros_like(re),
        24.0 / safe,
        24.0 * safe ** -0.646,
        np.full_like(re, 0.5),
        3.66e-4 * safe ** 0.4275,
    ]
    return np.select(conditions, choices, default=0.18)


def reynolds_number(density: float, speed: float, diameter: float,
                    mu: float) -> float:
    """Re = rho v d / mu."""
    return density * speed * diameter / mu


def drag_force(velocity: np.ndarray, density: float, cd: float,
               area: float) -> np.ndarray:
    """
    Aerodynamic drag force vector (N).

    F_drag = -½ ρ |v|² Cd A v̂

    A zero velocity gives NaN components; callers must not pass one.
    """
    velocity = np.asarray(velocity, dtype=float)
    v_mag = np.sqrt(np.dot(velocity, velocity))
    v_hat = velocity / v_mag
    q = 0.5 * density * v_mag ** 2
    return -cd * q * area * v_hat
