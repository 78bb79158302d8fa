"""
Live Projectiles, Targets & Collision
=====================================
Frame-by-frame state for real-time animation:
  - Bounds: axis-aligned rectangle used as a cheap proxy for a sprite
  - LiveProjectile: one trajectory point advanced by RK4 every frame
  - Target: a drifting rectangle whose height follows a motion generator
  - any_hit: rectangle intersection between a target and projectiles

Nothing here draws anything; a presentation layer reads the bounds and
points and renders them however it likes.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Tuple

import numpy as np

from .integrator import rk4_step
from .projectile import PhysicalConstants, TrajectoryPoint, CANNONBALL, launch_point

Vec2 = Tuple[float, float]

DEFAULT_BOX_SIZE = 10.0      # m, side of a projectile's bounding box


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle given by two opposite corners."""
    min: Vec2
    max: Vec2

    @classmethod
    def around(cls, center, size) -> "Bounds":
        """Rectangle of the given (width, height) centered on center."""
        if np.isscalar(size):
            size = (size, size)
        cx, cy = float(center[0]), float(center[1])
        hw, hh = 0.5 * float(size[0]), 0.5 * float(size[1])
        return cls((cx - hw, cy - hh), (cx + hw, cy + hh))

    def normalized(self) -> "Bounds":
        """Same rectangle with min <= max on both axes."""
        return Bounds(
            (min(self.min[0], self.max[0]), min(self.min[1], self.max[1])),
            (max(self.min[0], self.max[0]), max(self.min[1], self.max[1])),
        )

    def moved(self, delta) -> "Bounds":
        dx, dy = float(delta[0]), float(delta[1])
        return Bounds((self.min[0] + dx, self.min[1] + dy),
                      (self.max[0] + dx, self.max[1] + dy))

    @property
    def width(self) -> float:
        return self.max[0] - self.min[0]

    @property
    def height(self) -> float:
        return self.max[1] - self.min[1]

    @property
    def center(self) -> Vec2:
        return (0.5 * (self.min[0] + self.max[0]),
                0.5 * (self.min[1] + self.max[1]))

    def intersects(self, other: "Bounds") -> bool:
        """True if the two rectangles share a region of non-zero area."""
        a = self.normalized()
        b = other.normalized()
        overlap_x = min(a.max[0], b.max[0]) - max(a.min[0], b.min[0])
        overlap_y = min(a.max[1], b.max[1]) - max(a.min[1], b.min[1])
        return overlap_x > 0.0 and overlap_y > 0.0


def any_hit(target_bounds: Bounds, projectile_bounds: Iterable[Bounds]) -> bool:
    """Does any projectile rectangle intersect the target rectangle?"""
    return any(target_bounds.intersects(b) for b in projectile_bounds)


class LiveProjectile:
    """
    A single projectile advanced incrementally, one frame at a time.

    The bounding box center follows the projectile position. No ground
    check happens here; whoever owns the projectile removes it once
    is_grounded() says so.
    """

    def __init__(self, point: TrajectoryPoint, bounds: Bounds,
                 constants: PhysicalConstants = CANNONBALL,
                 drag: bool = True):
        self.point = point
        self.bounds = bounds
        self.constants = constants
        self.drag = drag

    @classmethod
    def fire(cls, altitude: float, angle_deg: float, speed: float,
             constants: PhysicalConstants = CANNONBALL,
             box_size: float = DEFAULT_BOX_SIZE,
             drag: bool = True) -> "LiveProjectile":
        point = launch_point(altitude, angle_deg, speed, constants, drag)
        return cls(point, Bounds.around(point.position, box_size),
                   constants, drag)

    def advance(self, dt: float) -> TrajectoryPoint:
        """Step the projectile forward by dt and return the new point."""
        new_point = rk4_step(self.point, dt, self.constants, self.drag)
        self.bounds = self.bounds.moved(new_point.position - self.point.position)
        self.point = new_point
        return new_point

    def is_grounded(self, ground: float = 0.0) -> bool:
        return self.point.altitude <= ground

    def __repr__(self):
        x, y = self.point.position
        return (f"LiveProjectile(t={self.point.time:.2f}, "
                f"x={x:.1f}, y={y:.1f}, speed={self.point.speed:.1f})")


# ══════════════════════════════════════════════════════════════════════════
#  Targets
# ══════════════════════════════════════════════════════════════════════════

class MotionGenerator(Protocol):
    """Maps a 1D motion phase to a vertical offset, roughly in [-1, 1]."""

    def offset(self, phase: float) -> float:
        ...


class SmoothNoise:
    """
    1D value noise: random values on an integer lattice, blended with a
    cosine ease between neighbours. Repeats every `period` units.
    """

    def __init__(self, seed: Optional[int] = None, period: int = 256):
        rng = np.random.default_rng(seed)
        self.period = period
        self._lattice = rng.uniform(-1.0, 1.0, size=period)

    def offset(self, phase: float) -> float:
        i0 = math.floor(phase)
        frac = phase - i0
        v0 = self._lattice[i0 % self.period]
        v1 = self._lattice[(i0 + 1) % self.period]
        w = 0.5 * (1.0 - math.cos(math.pi * frac))
        return float(v0 * (1.0 - w) + v1 * w)


@dataclass
class Target:
    """
    A target drifting horizontally while its height wanders.

    States: alive until remove() is called, then removed for good.
    A new Target is spawned to keep playing.
    """
    bounds: Bounds
    motion: MotionGenerator
    base_y: float
    amplitude: float = 50.0       # m
    phase: float = 0.0
    phase_rate: float = 0.5       # phase units per second
    drift: float = -20.0          # m/s, horizontal
    alive: bool = True
    removed_reason: Optional[str] = None   # "hit" or "drifted"

    @classmethod
    def spawn(cls, x: float, base_y: float, size, motion: MotionGenerator,
              phase: float = 0.0, **kwargs) -> "Target":
        target = cls(bounds=Bounds.around((x, base_y), size), motion=motion,
                     base_y=base_y, phase=phase, **kwargs)
        target.bounds = Bounds.around(target._center_at(x), size)
        return target

    def _center_at(self, x: float) -> Vec2:
        return (x, self.base_y + self.amplitude * self.motion.offset(self.phase))

    def step(self, dt: float) -> None:
        """Move the target forward by dt seconds."""
        if not self.alive:
            raise RuntimeError("Cannot move a target that has been removed")
        self.phase += self.phase_rate * dt
        cx, _ = self.bounds.center
        size = (self.bounds.width, self.bounds.height)
        self.bounds = Bounds.around(self._center_at(cx + self.drift * dt), size)

    def check_hit(self, projectile_bounds: Iterable[Bounds]) -> bool:
        """Collision test; a hit moves the target to the removed state."""
        if self.alive and any_hit(self.bounds, projectile_bounds):
            self.remove("hit")
            return True
        return False

    def remove(self, reason: str) -> None:
        self.alive = False
        self.removed_reason = reason
