"""
Cannonball Trajectory Engine
============================
Ballistic trajectories of a spherical projectile in the lower atmosphere:
  - Gravity
  - Reynolds-number dependent sphere drag
  - Simplified standard atmosphere (density, temperature, viscosity)

Fixed-step 4th-order Runge-Kutta integration, either as a full batch
trajectory that lands exactly on the launch altitude or frame by frame
for live projectiles, plus rectangle collision against a wandering
target.
"""

from .atmosphere import simple_atmosphere, viscosity, atmosphere_profile
from .drag_model import cd_sphere, cd_sphere_array, reynolds_number, drag_force
from .projectile import (
    PhysicalConstants, TrajectoryPoint, BASEBALL, CANNONBALL, PROFILES,
    get_profile, compute_acceleration, launch_point, check_launch,
)
from .integrator import (
    rk4_step, correct_final_position, simulate_trajectory,
    TrajectoryResult, TrajectoryNotResolvedError,
)
from .live import (
    Bounds, LiveProjectile, Target, MotionGenerator, SmoothNoise, any_hit,
)
from .scene import Scene, SceneConfig, Launcher, StepReport

__version__ = "1.0.0"
__all__ = [
    'PhysicalConstants', 'TrajectoryPoint', 'TrajectoryResult',
    'BASEBALL', 'CANNONBALL', 'PROFILES', 'get_profile',
    'simple_atmosphere', 'viscosity', 'atmosphere_profile',
    'cd_sphere', 'cd_sphere_array', 'reynolds_number', 'drag_force',
    'compute_acceleration', 'launch_point', 'check_launch',
    'rk4_step', 'correct_final_position', 'simulate_trajectory',
    'TrajectoryNotResolvedError',
    'Bounds', 'LiveProjectile', 'Target', 'MotionGenerator', 'SmoothNoise',
    'any_hit',
    'Scene', 'SceneConfig', 'Launcher', 'StepReport',
]
