"""
Headless Scene
==============
The frame loop every presentation variant needs, without any drawing:
  - Launcher: launch parameters and the preview trajectory, recomputed
    whenever altitude, angle or speed changes
  - Scene: active projectiles + one target, stepped on a shared clock

A renderer calls Scene.step() once per frame and then draws
scene.projectiles and scene.target from their bounds.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .integrator import (
    TrajectoryResult, simulate_trajectory, DEFAULT_DT,
)
from .live import LiveProjectile, Target, SmoothNoise, DEFAULT_BOX_SIZE
from .projectile import PhysicalConstants, CANNONBALL, check_launch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneConfig:
    dt: float = DEFAULT_DT            # s per frame
    ground: float = 0.0               # m, projectiles at or below are removed
    box_size: float = DEFAULT_BOX_SIZE
    target_size: float = 40.0         # m
    target_altitude: float = 150.0    # m, center of the target's wander
    target_amplitude: float = 60.0    # m
    target_speed: float = 15.0        # m/s, drifting toward the launcher
    spawn_x: float = 900.0            # m
    seed: Optional[int] = None
    respawn: bool = True


@dataclass
class StepReport:
    frame: int
    hit: bool
    removed: int
    active: int


@dataclass
class Launcher:
    """
    Launch parameters plus the trajectory they produce.

    Any change replaces the cached trajectory wholesale.
    """
    altitude: float = 0.0             # m
    angle_deg: float = 40.0           # degrees from horizontal
    speed: float = 100.0              # m/s
    constants: PhysicalConstants = CANNONBALL
    dt: float = DEFAULT_DT
    _trajectory: Optional[TrajectoryResult] = field(default=None, init=False, repr=False)

    def _compute(self, altitude: float, angle_deg: float,
                 speed: float) -> TrajectoryResult:
        check_launch(speed, self.dt)
        return simulate_trajectory(altitude, speed, angle_deg, self.dt,
                                   normalized=True, constants=self.constants)

    @property
    def trajectory(self) -> TrajectoryResult:
        if self._trajectory is None:
            self._trajectory = self._compute(self.altitude, self.angle_deg,
                                             self.speed)
        return self._trajectory

    def nudge(self, angle: float = 0.0, speed: float = 0.0,
              altitude: float = 0.0) -> TrajectoryResult:
        """
        Adjust the launch and return the recomputed trajectory.

        If the new launch is rejected or never lands, the error propagates
        and the previous parameters and trajectory are kept.
        """
        new_altitude = self.altitude + altitude
        new_angle = self.angle_deg + angle
        new_speed = self.speed + speed
        trajectory = self._compute(new_altitude, new_angle, new_speed)
        self.altitude = new_altitude
        self.angle_deg = new_angle
        self.speed = new_speed
        self._trajectory = trajectory
        return trajectory


class Scene:
    """
    Active projectiles and a wandering target on one simulation clock.

    Projectiles live in a dense list; removal swaps the last entry into
    the freed slot.
    """

    def __init__(self, config: SceneConfig = SceneConfig(),
                 constants: PhysicalConstants = CANNONBALL):
        self.config = config
        self.constants = constants
        self.projectiles: List[LiveProjectile] = []
        self.frame = 0
        self.hits = 0
        self._noise = SmoothNoise(config.seed)
        self._spawn_count = 0
        self.target: Optional[Target] = None
        self.spawn_target()

    def spawn_target(self) -> Target:
        cfg = self.config
        self.target = Target.spawn(
            x=cfg.spawn_x,
            base_y=cfg.target_altitude,
            size=cfg.target_size,
            motion=self._noise,
            phase=37.0 * self._spawn_count,
            amplitude=cfg.target_amplitude,
            drift=-cfg.target_speed,
        )
        self._spawn_count += 1
        logger.debug("Spawned target at %s", self.target.bounds.center)
        return self.target

    def fire(self, altitude: float, angle_deg: float, speed: float) -> LiveProjectile:
        check_launch(speed, self.config.dt)
        projectile = LiveProjectile.fire(altitude, angle_deg, speed,
                                         self.constants, self.config.box_size)
        self.projectiles.append(projectile)
        return projectile

    def fire_from(self, launcher: Launcher) -> LiveProjectile:
        return self.fire(launcher.altitude, launcher.angle_deg, launcher.speed)

    def _remove_at(self, index: int) -> None:
        last = self.projectiles.pop()
        if index < len(self.projectiles):
            self.projectiles[index] = last

    def step(self) -> StepReport:
        """Advance everything by one frame."""
        cfg = self.config
        self.frame += 1

        removed = 0
        i = 0
        while i < len(self.projectiles):
            projectile = self.projectiles[i]
            projectile.advance(cfg.dt)
            if projectile.is_grounded(cfg.ground):
                self._remove_at(i)
                removed += 1
                # the last projectile now sits at i, not yet advanced
                continue
            i += 1

        hit = False
        if self.target is not None and self.target.alive:
            self.target.step(cfg.dt)
            if self.target.check_hit(p.bounds for p in self.projectiles):
                hit = True
                self.hits += 1
                logger.info("Target hit at frame %d", self.frame)
            elif self.target.bounds.max[0] < 0.0:
                logger.debug("Target drifted past the launcher")
                self.target.remove("drifted")

        if self.target is not None and not self.target.alive:
            self.target = self.spawn_target() if cfg.respawn else None

        return StepReport(frame=self.frame, hit=hit, removed=removed,
                          active=len(self.projectiles))

    def run(self, frames: int) -> List[StepReport]:
        return [self.step() for _ in range(frames)]
