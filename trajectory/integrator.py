"""
Numerical Integration Engine
=============================
Fixed-step 4th-order Runge-Kutta integration of the projectile equations
of motion:

    dx/dt = v
    dv/dt = a(t, x, v)  (from compute_acceleration)

The batch generator runs RK4 until the projectile comes back down to its
launch altitude, then interpolates the last step so the final point lies
exactly on that altitude.

Output: TrajectoryResult dataclass with the full point history.
"""

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from .projectile import (
    PhysicalConstants, TrajectoryPoint, CANNONBALL,
    compute_acceleration, launch_point,
)

logger = logging.getLogger(__name__)

DEFAULT_DT = 0.1            # s
DEFAULT_MAX_STEPS = 100_000


class TrajectoryNotResolvedError(RuntimeError):
    """The trajectory never crossed back down through the launch altitude."""

    def __init__(self, message: str, steps: int):
        super().__init__(message)
        self.steps = steps


def rk4_step(point: TrajectoryPoint, h: float,
             constants: PhysicalConstants = CANNONBALL,
             drag: bool = True) -> TrajectoryPoint:
    """
    Advance one trajectory point by a time step h.

    Classic RK4 on the coupled position/velocity system. The acceleration
    of the returned point is evaluated at the new state.
    """
    def accel(t, x, v):
        return compute_acceleration(t, x, v, constants, drag)

    t = point.time
    pos = point.position
    vel = point.velocity

    k1v = accel(t, pos, vel)
    k1x = vel

    k2v = accel(t + 0.5 * h, pos + 0.5 * h * k1x, vel + 0.5 * h * k1v)
    k2x = vel + 0.5 * h * k1v

    k3v = accel(t + 0.5 * h, pos + 0.5 * h * k2x, vel + 0.5 * h * k2v)
    k3x = vel + 0.5 * h * k2v

    k4v = accel(t + h, pos + h * k3x, vel + h * k3v)
    k4x = vel + h * k3v

    new_pos = pos + (h / 6.0) * (k1x + 2 * k2x + 2 * k3x + k4x)
    new_vel = vel + (h / 6.0) * (k1v + 2 * k2v + 2 * k3v + k4v)
    new_t = t + h

    return TrajectoryPoint(
        time=new_t,
        position=new_pos,
        velocity=new_vel,
        acceleration=accel(new_t, new_pos, new_vel),
    )


def correct_final_position(boundary: float, a1: TrajectoryPoint,
                           a2: TrajectoryPoint) -> TrajectoryPoint:
    """
    Interpolate between a1 and a2 to the point whose altitude is boundary.

    a1 must be above the boundary and a2 at or below it.
    """
    fraction = (boundary - a1.position[1]) / (a2.position[1] - a1.position[1])

    def lerp(u, w):
        return u + fraction * (w - u)

    position = lerp(a1.position, a2.position)
    position[1] = boundary
    return TrajectoryPoint(
        time=lerp(a1.time, a2.time),
        position=position,
        velocity=lerp(a1.velocity, a2.velocity),
        acceleration=lerp(a1.acceleration, a2.acceleration),
    )


@dataclass
class TrajectoryResult:
    """Complete trajectory output of one batch run."""
    points: List[TrajectoryPoint]
    constants: PhysicalConstants
    initial_altitude: float   # m
    initial_velocity: float   # m/s
    angle_deg: float          # degrees from horizontal
    dt: float                 # timestep used
    normalized: bool          # altitudes relative to the launch altitude

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    # ── Array views, each of shape (N,) ────────────────────────────────
    @property
    def time(self) -> np.ndarray:
        return np.array([p.time for p in self.points])

    @property
    def x(self) -> np.ndarray:
        return np.array([p.position[0] for p in self.points])

    @property
    def y(self) -> np.ndarray:
        return np.array([p.position[1] for p in self.points])

    @property
    def vx(self) -> np.ndarray:
        return np.array([p.velocity[0] for p in self.points])

    @property
    def vy(self) -> np.ndarray:
        return np.array([p.velocity[1] for p in self.points])

    @property
    def ax(self) -> np.ndarray:
        return np.array([p.acceleration[0] for p in self.points])

    @property
    def ay(self) -> np.ndarray:
        return np.array([p.acceleration[1] for p in self.points])

    @property
    def speed(self) -> np.ndarray:
        return np.hypot(self.vx, self.vy)

    # ── Flight summary ─────────────────────────────────────────────────
    @property
    def flight_time(self) -> float:
        """Total flight time (s)."""
        return self.points[-1].time

    @property
    def range_total(self) -> float:
        """Horizontal distance at the final point (m)."""
        return float(self.points[-1].position[0])

    @property
    def max_altitude(self) -> float:
        """Apex altitude in the output frame (m)."""
        return float(np.max(self.y))

    @property
    def apex_time(self) -> float:
        return float(self.time[int(np.argmax(self.y))])

    @property
    def impact_velocity(self) -> float:
        """Speed at the final point (m/s)."""
        return self.points[-1].speed

    @property
    def impact_angle_deg(self) -> float:
        """Angle of descent at the final point (degrees below horizontal)."""
        vx_f, vy_f = self.points[-1].velocity
        return float(np.degrees(np.arctan2(-vy_f, abs(vx_f))))

    def summary(self) -> str:
        """Human-readable summary string."""
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {self.constants.name:<30s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Diameter     : {self.constants.diameter_m:>10.4f} m{'':<24s} ║",
            f"║  Mass         : {self.constants.mass_kg:>10.3f} kg{'':<23s} ║",
            f"║  Timestep     : {self.dt:<36.4f} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Altitude     : {self.initial_altitude:>10.1f} m{'':<24s} ║",
            f"║  Launch vel   : {self.initial_velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {self.angle_deg:>10.1f} °{'':<24s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.range_total:>10.1f} m{'':<24s} ║",
            f"║  Max altitude : {self.max_altitude:>10.1f} m{'':<24s} ║",
            f"║  Flight time  : {self.flight_time:>10.2f} s{'':<24s} ║",
            f"║  Impact vel   : {self.impact_velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Impact angle : {self.impact_angle_deg:>10.1f} °{'':<24s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)

    def history_table(self) -> str:
        """Fixed-width table of every point: t x y vx vy ax ay."""
        lines = ["      t           x           y          vx"
                 "          vy          ax          ay"]
        for p in self.points:
            lines.append(
                f"{p.time:9.2f} {p.position[0]:11.2f} {p.position[1]:11.2f} "
                f"{p.velocity[0]:11.2f} {p.velocity[1]:11.2f} "
                f"{p.acceleration[0]:11.2f} {p.acceleration[1]:11.2f}"
            )
        return '\n'.join(lines)


def simulate_trajectory(initial_altitude: float, initial_velocity: float,
                        angle_deg: float, dt: float = DEFAULT_DT,
                        normalized: bool = True,
                        constants: PhysicalConstants = CANNONBALL,
                        max_steps: int = DEFAULT_MAX_STEPS,
                        drag: bool = True) -> TrajectoryResult:
    """
    Integrate a trajectory until it returns to the launch altitude.

    Parameters
    ----------
    initial_altitude : float
        Launch altitude (m); also the altitude the final point lands on.
    initial_velocity : float
        Launch speed (m/s). Must be non-zero.
    angle_deg : float
        Elevation above horizontal (degrees).
    dt : float
        Fixed RK4 time step (s).
    normalized : bool
        Shift every altitude by -initial_altitude so the launch reads 0.
    constants : PhysicalConstants
    max_steps : int
        RK4 steps allowed before giving up.
    drag : bool
        False integrates pure gravity.

    Raises
    ------
    TrajectoryNotResolvedError
        If no crossing happens within max_steps, or the projectile goes
        below the launch altitude without ever having been above it.
    """
    history = [launch_point(initial_altitude, angle_deg, initial_velocity,
                            constants, drag)]

    steps = 0
    while True:
        if steps >= max_steps:
            raise TrajectoryNotResolvedError(
                f"Trajectory did not return to {initial_altitude} m "
                f"within {max_steps} steps of {dt} s", steps)
        new_point = rk4_step(history[-1], dt, constants, drag)
        steps += 1
        history.append(new_point)
        if not new_point.altitude > initial_altitude:
            break

    if not history[-2].altitude > initial_altitude:
        raise TrajectoryNotResolvedError(
            f"Trajectory dropped below {initial_altitude} m after {steps} "
            f"step(s) without rising above it", steps)

    history[-1] = correct_final_position(initial_altitude,
                                         history[-2], history[-1])
    logger.debug("Trajectory resolved in %d steps, t=%.3f s",
                 steps, history[-1].time)

    if normalized:
        history = [p.shifted(-initial_altitude) for p in history]

    return TrajectoryResult(
        points=history,
        constants=constants,
        initial_altitude=initial_altitude,
        initial_velocity=initial_velocity,
        angle_deg=angle_deg,
        dt=dt,
        normalized=normalized,
    )
