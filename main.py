#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  CANNONBALL TRAJECTORY ENGINE — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the complete pipeline:
    1. Atmosphere model table
    2. Sphere Cd vs Reynolds number
    3. Batch trajectory for the chosen launch (full history table)
    4. Baseball vs cannonball comparison
    5. Validation against an adaptive reference solver
    6. Headless live scene (projectiles vs wandering target)
    7. Animated scene GIF

  All figures saved to outputs/ directory.

  Usage:
    python main.py                                  # Run everything
    python main.py --quick                          # Skip animation
    python main.py --altitude 1609 --angle 40 --velocity 35 --profile baseball

  Hints for altitude: Denver=1609  Mexico City=2420  La Paz=3650  Everest=8850
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import os
import sys
import time

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from trajectory.atmosphere import simple_atmosphere, viscosity, SEA_LEVEL_TEMP
from trajectory.drag_model import cd_sphere
from trajectory.projectile import PROFILES, get_profile, check_launch
from trajectory.integrator import simulate_trajectory, TrajectoryNotResolvedError
from trajectory.scene import Scene, SceneConfig, Launcher
from trajectory.validation import run_all_validations
from trajectory.visualization import (
    plot_trajectory, plot_profile_comparison, plot_cd_vs_reynolds,
    plot_atmosphere, create_scene_animation, ensure_output_dir,
)


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Cannonball trajectory engine")
    parser.add_argument("--altitude", type=float, default=0.0,
                        help="launch altitude in meters")
    parser.add_argument("--angle", type=float, default=40.0,
                        help="launch angle in degrees from horizontal")
    parser.add_argument("--velocity", type=float, default=100.0,
                        help="launch speed in m/s")
    parser.add_argument("--profile", choices=sorted(PROFILES), default="cannonball")
    parser.add_argument("--dt", type=float, default=0.1, help="time step in seconds")
    parser.add_argument("--absolute", action="store_true",
                        help="report altitudes above sea level instead of relative to launch")
    parser.add_argument("--frames", type=int, default=400,
                        help="frames for the live scene")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--out", default="outputs")
    parser.add_argument("--quick", action="store_true", help="skip the animation")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    start_time = time.time()

    try:
        check_launch(args.velocity, args.dt)
    except ValueError as e:
        print(f"  ✗ {e}")
        return 2

    constants = get_profile(args.profile)
    out = ensure_output_dir(args.out)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Atmosphere
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Simplified Atmosphere")
    print(f"  {'Alt (km)':>8} {'σ':>9} {'δ':>9} {'θ':>9} {'T (K)':>8} {'μ (kg/m·s)':>12}")
    for h in [0, 1, 2, 5, 8, 11, 15, 20]:
        sigma, delta, theta = simple_atmosphere(h)
        print(f"  {h:>8} {sigma:>9.5f} {delta:>9.5f} {theta:>9.5f} "
              f"{theta * SEA_LEVEL_TEMP:>8.2f} {viscosity(theta):>12.4e}")

    fig_atm = plot_atmosphere(save_path=f'{out}/01_atmosphere_profile.png')
    plt.close(fig_atm)
    print(f"\n  ✓ Saved: {out}/01_atmosphere_profile.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Drag Coefficient
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Sphere Cd vs Reynolds Number")
    for re in [0.5, 1.0, 10.0, 400.0, 1e4, 3e5, 1e6, 2e6, 1e7]:
        print(f"  Re = {re:>10.3g}   Cd = {cd_sphere(re):.4f}")

    fig_cd = plot_cd_vs_reynolds(save_path=f'{out}/02_cd_vs_reynolds.png')
    plt.close(fig_cd)
    print(f"\n  ✓ Saved: {out}/02_cd_vs_reynolds.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Batch Trajectory
    # ══════════════════════════════════════════════════════════════════════
    section(f"PHASE 3: {constants.name} Trajectory")
    try:
        result = simulate_trajectory(args.altitude, args.velocity, args.angle,
                                     args.dt, normalized=not args.absolute,
                                     constants=constants)
    except TrajectoryNotResolvedError as e:
        print(f"  ✗ {e}")
        return 1

    print(result.history_table())
    print(result.summary())

    fig_traj = plot_trajectory(result, save_path=f'{out}/03_trajectory.png')
    plt.close(fig_traj)
    print(f"  ✓ Saved: {out}/03_trajectory.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Profile Comparison
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Profile Comparison (Same Launch Conditions)")
    comparison = {}
    for key, profile in PROFILES.items():
        r = simulate_trajectory(args.altitude, args.velocity, args.angle,
                                args.dt, normalized=True, constants=profile)
        comparison[profile.name] = r
        print(f"  {profile.name:<12s}  Range: {r.range_total:>8.1f} m  "
              f"Apex: {r.max_altitude:>7.1f} m  ToF: {r.flight_time:>6.2f} s  "
              f"Impact: {r.impact_velocity:>6.1f} m/s")

    fig_cmp = plot_profile_comparison(comparison,
                                      save_path=f'{out}/04_profile_comparison.png')
    plt.close(fig_cmp)
    print(f"\n  ✓ Saved: {out}/04_profile_comparison.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Validation — RK4 vs Adaptive Reference")
    run_all_validations(dt=args.dt, verbose=True)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Live Scene
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Live Scene (headless)")
    config = SceneConfig(dt=args.dt, seed=args.seed)
    launcher = Launcher(altitude=0.0, angle_deg=args.angle, speed=args.velocity,
                        constants=constants, dt=args.dt)
    scene = Scene(config, constants)
    fired = 0
    for frame in range(args.frames):
        if frame % 20 == 0:
            scene.fire_from(launcher)
            fired += 1
        scene.step()
    print(f"  Frames: {scene.frame}  Fired: {fired}  Hits: {scene.hits}  "
          f"Still flying: {len(scene.projectiles)}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Animation
    # ══════════════════════════════════════════════════════════════════════
    if not args.quick:
        section("PHASE 7: Scene Animation (GIF)")
        create_scene_animation(Scene(config, constants), launcher,
                               save_path=f'{out}/07_scene.gif', frames=200)
        print(f"  ✓ Saved: {out}/07_scene.gif")
    else:
        section("PHASE 7: Animation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
