"""
Unit Tests for Live Projectiles, Targets and the Scene
======================================================
Run: python -m pytest tests/ -v
"""

import sys
import os

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajectory.projectile import CANNONBALL, BASEBALL
from trajectory.integrator import simulate_trajectory, TrajectoryNotResolvedError
from trajectory.live import Bounds, LiveProjectile, Target, SmoothNoise, any_hit
from trajectory.scene import Scene, SceneConfig, Launcher


class Flat:
    """Motion generator that never moves the target vertically."""

    def offset(self, phase):
        return 0.0


class TestBounds:

    def test_overlapping_rectangles_hit(self):
        assert any_hit(Bounds((0, 0), (2, 2)), [Bounds((1, 1), (3, 3))])

    def test_separate_rectangles_miss(self):
        assert not any_hit(Bounds((0, 0), (1, 1)), [Bounds((5, 5), (6, 6))])

    def test_touching_edges_do_not_hit(self):
        assert not Bounds((0, 0), (1, 1)).intersects(Bounds((1, 0), (2, 1)))

    def test_swapped_corners_are_normalized(self):
        flipped = Bounds((2, 2), (0, 0))
        assert flipped.intersects(Bounds((1, 1), (3, 3)))
        n = flipped.normalized()
        assert n.min == (0, 0)
        assert n.max == (2, 2)

    def test_any_hit_needs_one_match(self):
        target = Bounds((0, 0), (2, 2))
        shots = [Bounds((5, 5), (6, 6)), Bounds((1.5, 1.5), (2.5, 2.5))]
        assert any_hit(target, shots)
        assert not any_hit(target, [])

    def test_around_and_moved(self):
        b = Bounds.around((10.0, 20.0), 4.0)
        assert b.min == (8.0, 18.0)
        assert b.max == (12.0, 22.0)
        assert b.moved((1.0, -2.0)).center == (11.0, 18.0)
        assert b.width == 4.0
        assert b.height == 4.0


class TestLiveProjectile:

    def test_fire_centers_box_on_launch(self):
        p = LiveProjectile.fire(250.0, 40.0, 100.0, CANNONBALL, box_size=6.0)
        assert p.bounds.center == (0.0, 250.0)
        assert p.bounds.width == 6.0
        assert p.point.time == 0.0

    def test_box_tracks_position(self):
        p = LiveProjectile.fire(0.0, 40.0, 100.0, CANNONBALL)
        for _ in range(30):
            p.advance(0.1)
        np.testing.assert_allclose(p.bounds.center, p.point.position, atol=1e-9)
        assert p.bounds.width == pytest.approx(10.0)

    def test_matches_batch_run(self):
        """Stepping frame by frame reproduces the batch points."""
        result = simulate_trajectory(500.0, 100.0, 40.0, 0.1, normalized=False,
                                     constants=CANNONBALL)
        p = LiveProjectile.fire(500.0, 40.0, 100.0, CANNONBALL)
        for expected in result.points[1:-1]:
            p.advance(0.1)
            assert p.point.time == pytest.approx(expected.time)
            np.testing.assert_allclose(p.point.position, expected.position,
                                       rtol=1e-12, atol=1e-12)
            np.testing.assert_allclose(p.point.velocity, expected.velocity,
                                       rtol=1e-12, atol=1e-12)

    def test_keeps_going_below_ground(self):
        """advance() has no termination check of its own."""
        p = LiveProjectile.fire(20.0, 60.0, 30.0, BASEBALL)
        assert not p.is_grounded()
        while not p.is_grounded():
            p.advance(0.05)
        y = p.point.altitude
        p.advance(0.05)
        assert p.point.altitude < y
        assert p.is_grounded()

    def test_grounded_threshold(self):
        p = LiveProjectile.fire(5.0, 45.0, 20.0, CANNONBALL)
        assert p.is_grounded(ground=5.0)
        assert not p.is_grounded(ground=0.0)


class TestTarget:

    def test_noise_is_seeded_and_bounded(self):
        a = SmoothNoise(seed=3)
        b = SmoothNoise(seed=3)
        phases = np.linspace(-5.0, 50.0, 400)
        values = [a.offset(x) for x in phases]
        assert values == [b.offset(x) for x in phases]
        assert all(-1.0 <= v <= 1.0 for v in values)

    def test_noise_is_continuous(self):
        n = SmoothNoise(seed=11)
        for k in range(10):
            assert abs(n.offset(k + 1e-7) - n.offset(k)) < 1e-6
            assert abs(n.offset(k + 1 - 1e-7) - n.offset(k + 1)) < 1e-6

    def test_step_drifts_and_wanders(self):
        t = Target.spawn(x=500.0, base_y=100.0, size=20.0,
                         motion=SmoothNoise(seed=1), amplitude=30.0, drift=-10.0)
        for _ in range(50):
            t.step(0.1)
            cy = t.bounds.center[1]
            assert 70.0 - 1e-9 <= cy <= 130.0 + 1e-9
        assert t.bounds.center[0] == pytest.approx(450.0)
        assert t.bounds.width == pytest.approx(20.0)

    def test_hit_removes_target(self):
        t = Target.spawn(x=0.0, base_y=0.0, size=2.0, motion=Flat())
        assert not t.check_hit([Bounds((5, 5), (6, 6))])
        assert t.alive
        assert t.check_hit([Bounds((0.5, 0.5), (1.5, 1.5))])
        assert not t.alive
        assert t.removed_reason == "hit"
        assert not t.check_hit([Bounds((0.5, 0.5), (1.5, 1.5))])
        with pytest.raises(RuntimeError):
            t.step(0.1)


def _target_on_path(index, **overrides):
    """Scene whose stationary target sits on the 40°/100 m/s path."""
    result = simulate_trajectory(0.0, 100.0, 40.0, 0.1, constants=CANNONBALL)
    x, y = result[index].position
    settings = dict(spawn_x=float(x), target_altitude=float(y),
                    target_amplitude=0.0, target_speed=0.0, seed=5)
    settings.update(overrides)
    return SceneConfig(**settings)


class TestScene:

    def test_projectiles_removed_when_grounded(self):
        scene = Scene(SceneConfig(spawn_x=1e6, seed=2))
        scene.fire(0.0, 40.0, 100.0)
        reports = scene.run(200)
        assert sum(r.removed for r in reports) == 1
        assert scene.projectiles == []
        assert reports[-1].active == 0

    def test_swap_remove_steps_everyone_once(self):
        scene = Scene(SceneConfig(spawn_x=1e6, seed=2))
        for angle in (80.0, 5.0, 60.0, 45.0):
            scene.fire(0.0, angle, 100.0)
        for frame in range(1, 40):
            scene.step()
            for p in scene.projectiles:
                assert p.point.time == pytest.approx(frame * 0.1)
        assert len(scene.projectiles) < 4

    def test_hit_with_respawn(self):
        scene = Scene(_target_on_path(50))
        scene.fire(0.0, 40.0, 100.0)
        reports = scene.run(60)
        assert any(r.hit for r in reports)
        assert scene.hits >= 1
        assert scene.target is not None
        assert scene.target.alive

    def test_hit_without_respawn(self):
        scene = Scene(_target_on_path(50, respawn=False))
        scene.fire(0.0, 40.0, 100.0)
        reports = scene.run(60)
        assert [r.hit for r in reports].count(True) == 1
        assert scene.target is None

    def test_miss(self):
        scene = Scene(_target_on_path(50, target_altitude=2000.0))
        scene.fire(0.0, 40.0, 100.0)
        scene.run(60)
        assert scene.hits == 0

    def test_target_drifting_past_launcher_respawns(self):
        cfg = SceneConfig(spawn_x=5.0, target_size=4.0, target_speed=100.0,
                          target_amplitude=0.0, seed=1)
        scene = Scene(cfg)
        first = scene.target
        scene.run(3)
        assert not first.alive
        assert first.removed_reason == "drifted"
        assert scene.target is not first
        assert scene.hits == 0

    def test_zero_speed_rejected(self):
        scene = Scene(SceneConfig(seed=1))
        with pytest.raises(ValueError):
            scene.fire(0.0, 40.0, 0.0)
        assert scene.projectiles == []


class TestLauncher:

    def test_trajectory_cached_until_changed(self):
        launcher = Launcher(altitude=0.0, angle_deg=40.0, speed=100.0)
        first = launcher.trajectory
        assert launcher.trajectory is first
        second = launcher.nudge(angle=5.0)
        assert second is not first
        assert second.angle_deg == 45.0
        assert abs(second[-1].position[1]) < 1e-6

    def test_faster_goes_further(self):
        launcher = Launcher(angle_deg=40.0, speed=100.0)
        base = launcher.trajectory.range_total
        assert launcher.nudge(speed=10.0).range_total > base

    def test_zero_speed_nudge_rejected(self):
        launcher = Launcher(speed=100.0)
        first = launcher.trajectory
        with pytest.raises(ValueError):
            launcher.nudge(speed=-100.0)
        assert launcher.speed == 100.0
        assert launcher.trajectory is first

    def test_unresolved_nudge_keeps_previous_launch(self):
        launcher = Launcher(angle_deg=40.0, speed=100.0)
        first = launcher.trajectory
        with pytest.raises(TrajectoryNotResolvedError):
            launcher.nudge(angle=-40.0)
        assert launcher.angle_deg == 40.0
        assert launcher.trajectory is first
        assert launcher.nudge(angle=5.0).angle_deg == 45.0

    def test_fire_from_launcher(self):
        scene = Scene(SceneConfig(seed=1))
        launcher = Launcher(altitude=10.0, angle_deg=30.0, speed=50.0)
        p = scene.fire_from(launcher)
        assert p.point.altitude == 10.0
        assert scene.projectiles == [p]


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
