"""
Validation Against Reference Solutions
======================================
Cross-checks the fixed-step RK4 engine against:
  - An adaptive high-order solve of the same equations of motion
    (scipy.integrate.solve_ivp, DOP853, tight tolerances) with exact
    event location for the apex and the landing
  - The closed-form vacuum parabola, with drag switched off

Reference launches cover both projectile profiles at sea level and at
altitude (Denver 1609 m, Mexico City 2420 m, La Paz 3650 m).
"""

from dataclasses import dataclass
from typing import List

import numpy as np
from scipy.integrate import solve_ivp

from .projectile import (
    PhysicalConstants, CANNONBALL, get_profile,
    compute_acceleration, initial_velocity_vector,
)
from .integrator import simulate_trajectory, TrajectoryNotResolvedError


# (profile, altitude_m, angle_deg, velocity_m_s)
REFERENCE_CASES = [
    ('baseball',      0.0,   40.0,  35.0),
    ('baseball',   1609.0,   40.0,  35.0),
    ('baseball',   3650.0,   30.0,  45.0),
    ('cannonball',    0.0,   40.0, 100.0),
    ('cannonball', 2420.0,   45.0, 100.0),
    ('cannonball',    0.0,   75.0, 150.0),
]


@dataclass
class ReferenceResult:
    """Landing and apex located by the adaptive solver."""
    flight_time: float    # s
    range_total: float    # m
    max_altitude: float   # m above the launch altitude
    apex_time: float      # s


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    profile: str
    altitude: float
    angle_deg: float
    velocity: float
    ref_range: float
    sim_range: float
    range_error_pct: float
    ref_max_alt: float
    sim_max_alt: float
    alt_error_pct: float
    ref_tof: float
    sim_tof: float
    tof_error_pct: float


def reference_trajectory(altitude: float, velocity: float, angle_deg: float,
                         constants: PhysicalConstants = CANNONBALL,
                         drag: bool = True,
                         rtol: float = 1e-10, atol: float = 1e-9) -> ReferenceResult:
    """
    Solve the trajectory with an adaptive solver until it returns to the
    launch altitude.
    """
    def rhs(t, s):
        acc = compute_acceleration(t, s[:2], s[2:], constants, drag)
        return np.concatenate([s[2:], acc])

    def landing(t, s):
        return s[1] - altitude
    landing.terminal = True
    landing.direction = -1

    def apex(t, s):
        return s[3]
    apex.direction = -1

    v0 = initial_velocity_vector(velocity, angle_deg)
    state0 = np.array([0.0, altitude, v0[0], v0[1]])
    # vacuum flight time with generous margin; drag only shortens it
    t_max = 4.0 * abs(velocity) / constants.gravity_m_s2 + 10.0

    sol = solve_ivp(rhs, (0.0, t_max), state0, method='DOP853',
                    events=[landing, apex], rtol=rtol, atol=atol)

    if sol.status != 1 or len(sol.t_events[0]) == 0:
        raise TrajectoryNotResolvedError(
            f"Reference solve did not land within {t_max:.1f} s: {sol.message}",
            len(sol.t))

    t_land = float(sol.t_events[0][0])
    land_state = sol.y_events[0][0]
    if len(sol.t_events[1]):
        apex_time = float(sol.t_events[1][0])
        apex_alt = float(sol.y_events[1][0][1])
    else:
        apex_time, apex_alt = 0.0, altitude

    return ReferenceResult(
        flight_time=t_land,
        range_total=float(land_state[0]),
        max_altitude=apex_alt - altitude,
        apex_time=apex_time,
    )


def _pct(sim, ref):
    return 100.0 * (sim - ref) / ref


def validate_against_reference(cases=REFERENCE_CASES, dt: float = 0.1,
                               verbose: bool = True) -> List[ValidationResult]:
    """
    Run the RK4 batch generator for each launch case and compare against
    the adaptive reference solution.
    """
    results = []

    if verbose:
        print(f"\n{'='*84}")
        print(f"  VALIDATION: fixed-step RK4 (dt={dt} s) vs adaptive DOP853")
        print(f"{'='*84}")
        print(f"{'Profile':>11} {'Alt':>6} {'Elev°':>6} {'V0':>6} "
              f"{'Ref R':>8} {'Sim R':>8} {'Err %':>7} "
              f"{'Ref H':>7} {'Sim H':>7} {'Err %':>7} {'Ref T':>6} {'Err %':>7}")
        print("-" * 84)

    for profile, altitude, angle, velocity in cases:
        constants = get_profile(profile)
        ref = reference_trajectory(altitude, velocity, angle, constants)
        sim = simulate_trajectory(altitude, velocity, angle, dt,
                                  normalized=True, constants=constants)

        vr = ValidationResult(
            profile=profile,
            altitude=altitude,
            angle_deg=angle,
            velocity=velocity,
            ref_range=ref.range_total,
            sim_range=sim.range_total,
            range_error_pct=_pct(sim.range_total, ref.range_total),
            ref_max_alt=ref.max_altitude,
            sim_max_alt=sim.max_altitude,
            alt_error_pct=_pct(sim.max_altitude, ref.max_altitude),
            ref_tof=ref.flight_time,
            sim_tof=sim.flight_time,
            tof_error_pct=_pct(sim.flight_time, ref.flight_time),
        )
        results.append(vr)

        if verbose:
            print(f"{profile:>11} {altitude:>6.0f} {angle:>6.0f} {velocity:>6.0f} "
                  f"{vr.ref_range:>8.1f} {vr.sim_range:>8.1f} {vr.range_error_pct:>+7.2f} "
                  f"{vr.ref_max_alt:>7.1f} {vr.sim_max_alt:>7.1f} {vr.alt_error_pct:>+7.2f} "
                  f"{vr.ref_tof:>6.2f} {vr.tof_error_pct:>+7.2f}")

    if verbose:
        worst = max(abs(r.range_error_pct) for r in results)
        print("-" * 84)
        print(f"  Worst range error: {worst:.3f}%")
        status = "✓ PASS" if worst < 1.0 else "✗ CHECK TIME STEP"
        print(f"  Status: {status}")
        print(f"{'='*84}\n")

    return results


def vacuum_error(altitude: float, velocity: float, angle_deg: float,
                 dt: float = 0.1,
                 constants: PhysicalConstants = CANNONBALL) -> dict:
    """
    Compare a drag-free RK4 run with the closed-form parabola.

    Returns the largest position error over the un-interpolated points and
    the flight time error.
    """
    result = simulate_trajectory(altitude, velocity, angle_deg, dt,
                                 normalized=True, constants=constants,
                                 drag=False)
    vx0, vy0 = initial_velocity_vector(velocity, angle_deg)
    g = constants.gravity_m_s2

    t = result.time[:-1]
    x_exact = vx0 * t
    y_exact = vy0 * t - 0.5 * g * t ** 2
    pos_err = np.hypot(result.x[:-1] - x_exact, result.y[:-1] - y_exact)

    return {
        'max_position_error': float(np.max(pos_err)),
        'flight_time_error': abs(result.flight_time - 2.0 * vy0 / g),
        'range_error': abs(result.range_total - vx0 * 2.0 * vy0 / g),
        'apex_exact': vy0 ** 2 / (2.0 * g),
        'points': len(result),
    }


def run_all_validations(dt: float = 0.1, verbose: bool = True) -> dict:
    """Run the reference comparison and the vacuum check."""
    results = validate_against_reference(REFERENCE_CASES, dt=dt, verbose=verbose)
    vac = vacuum_error(0.0, 100.0, 40.0, dt=dt)
    if verbose:
        print(f"  Vacuum check (100 m/s, 40°): "
              f"max position error {vac['max_position_error']:.2e} m, "
              f"flight time error {vac['flight_time_error']:.2e} s")
    return {'reference': results, 'vacuum': vac}
