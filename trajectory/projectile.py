"""
Projectile Definition & Acceleration
====================================
Physical constants of a spherical projectile, the trajectory point value
type, and the acceleration acting on the projectile:
  - Gravity
  - Aerodynamic drag (Reynolds-number dependent sphere Cd)
  - Air density and viscosity from the simplified atmosphere

Coordinate system:
  x = downrange (horizontal)
  y = altitude  (vertical, up positive)
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .atmosphere import simple_atmosphere, viscosity
from .drag_model import cd_sphere, reynolds_number, drag_force


# ── Unit conversions ──────────────────────────────────────────────────────
FT_TO_M   = 0.3048          # feet to meters
LB_TO_KG  = 0.45359237      # pounds to kilograms
GRAVITY   = 9.8066          # m/s²
RHO_ZERO  = 1.2250          # kg/m³, sea-level air density

VERTICAL = np.array([0.0, 1.0])


@dataclass(frozen=True)
class PhysicalConstants:
    """
    Physical properties of a spherical projectile and its environment.
    Different projectiles are different constant sets, not different types.
    """
    name: str = "Projectile"
    diameter_m: float = 0.1           # m
    mass_kg: float = 1.0              # kg
    gravity_m_s2: float = GRAVITY     # m/s²
    sea_level_density_kg_m3: float = RHO_ZERO

    @property
    def frontal_area_m2(self) -> float:
        """Reference area 0.25 π d² (m²)."""
        return 0.25 * math.pi * self.diameter_m ** 2

    def with_changes(self, **changes) -> "PhysicalConstants":
        return replace(self, **changes)


# By the rules a baseball's circumference is 9 to 9.25 inches and its
# weight 5.00 to 5.25 ounces; the ideal ball sits in the middle.
BASEBALL = PhysicalConstants(
    name="Baseball",
    diameter_m=(9.125 / (12 * math.pi)) * FT_TO_M,
    mass_kg=(5.125 / 16) * LB_TO_KG,
)

# British cannonball, 4.95 in diameter.
CANNONBALL = PhysicalConstants(
    name="Cannonball",
    diameter_m=4.95 / 12 * FT_TO_M,
    mass_kg=5.4,
)

PROFILES = {
    'baseball': BASEBALL,
    'cannonball': CANNONBALL,
}


def get_profile(key: str) -> PhysicalConstants:
    if key not in PROFILES:
        raise ValueError(
            f"Unknown profile '{key}'. "
            f"Available: {list(PROFILES.keys())}"
        )
    return PROFILES[key]


def _frozen_vector(values) -> np.ndarray:
    vec = np.array(values, dtype=float).reshape(2)
    vec.flags.writeable = False
    return vec


@dataclass(frozen=True, eq=False)
class TrajectoryPoint:
    """
    State of the projectile at one instant.

    The acceleration is always the value compute_acceleration gives for
    this exact (time, position, velocity); it is never set independently.
    """
    time: float
    position: np.ndarray      # [x, y] m
    velocity: np.ndarray      # [vx, vy] m/s
    acceleration: np.ndarray  # [ax, ay] m/s²

    # Arrays are copied and made read-only so a point never changes.
    def __post_init__(self):
        object.__setattr__(self, 'time', float(self.time))
        object.__setattr__(self, 'position', _frozen_vector(self.position))
        object.__setattr__(self, 'velocity', _frozen_vector(self.velocity))
        object.__setattr__(self, 'acceleration',
                           _frozen_vector(self.acceleration))

    @property
    def altitude(self) -> float:
        return float(self.position[1])

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def shifted(self, dy: float) -> "TrajectoryPoint":
        """Same state with the altitude offset by dy."""
        return TrajectoryPoint(
            time=self.time,
            position=self.position + np.array([0.0, dy]),
            velocity=self.velocity,
            acceleration=self.acceleration,
        )


def compute_acceleration(time: float, position: np.ndarray,
                         velocity: np.ndarray,
                         constants: PhysicalConstants,
                         drag: bool = True) -> np.ndarray:
    """
    Acceleration (m/s²) of a sphere moving through still air.

    Parameters
    ----------
    time : float
        Unused by this model; kept so the signature matches a general
        time-dependent ODE right-hand side.
    position : [x, y] in meters
    velocity : [vx, vy] in m/s
    constants : PhysicalConstants
    drag : bool
        False forces Cd = 0, leaving pure gravity.

    Returns
    -------
    acceleration : np.ndarray [ax, ay]

    A velocity of exactly zero has no direction; the result is NaN and
    propagates through every later step.
    """
    velocity = np.asarray(velocity, dtype=float)
    speed = np.sqrt(np.dot(velocity, velocity))

    # simple_atmosphere takes kilometers
    sigma, _, theta = simple_atmosphere(0.001 * position[1])
    density = sigma * constants.sea_level_density_kg_m3

    if drag:
        re = reynolds_number(density, speed, constants.diameter_m,
                             viscosity(theta))
        cd = cd_sphere(re)
    else:
        cd = 0.0

    f_drag = drag_force(velocity, density, cd, constants.frontal_area_m2)
    return f_drag / constants.mass_kg - constants.gravity_m_s2 * VERTICAL


def initial_velocity_vector(speed: float, angle_deg: float) -> np.ndarray:
    """Convert launch speed + elevation angle to [vx, vy]."""
    theta = angle_deg * math.pi / 180.0
    return np.array([speed * math.cos(theta), speed * math.sin(theta)])


def launch_point(altitude_m: float, angle_deg: float, speed: float,
                 constants: PhysicalConstants,
                 drag: bool = True) -> TrajectoryPoint:
    """Initial trajectory point at t = 0, x = 0."""
    position = np.array([0.0, altitude_m])
    velocity = initial_velocity_vector(speed, angle_deg)
    return TrajectoryPoint(
        time=0.0,
        position=position,
        velocity=velocity,
        acceleration=compute_acceleration(0.0, position, velocity,
                                          constants, drag),
    )


def check_launch(speed: float, dt: Optional[float] = None) -> None:
    """
    Reject launch parameters the physics cannot handle.

    The acceleration function does not guard against a zero speed, so
    anything that fires a projectile calls this first.
    """
    if not math.isfinite(speed) or speed == 0.0:
        raise ValueError(f"Launch speed must be finite and non-zero, got {speed}")
    if dt is not None and (not math.isfinite(dt) or dt <= 0.0):
        raise ValueError(f"Time step must be finite and positive, got {dt}")
