"""
Visualization Engine
====================
Report figures for trajectory analysis:
  1. Trajectory (altitude vs downrange)
  2. Profile comparison (baseball vs cannonball, same launch)
  3. Cd vs Reynolds number
  4. Atmosphere profile
  5. Animated scene (live projectiles + wandering target, saved as GIF)

Figures are rendered off-screen with the Agg backend and saved to disk.
"""

import os
from typing import Dict

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .integrator import TrajectoryResult
from .drag_model import cd_sphere_array, REYNOLDS_BANDS
from .atmosphere import atmosphere_profile


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'font_family': 'monospace',
}

def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax, **kwargs):
    ax.legend(facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'], **kwargs)


def _save(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Single Trajectory Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(result: TrajectoryResult, save_path: str = None,
                    show: bool = False) -> plt.Figure:
    """Altitude vs downrange for a single trajectory."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    ax.plot(result.x, result.y, color=STYLE['accent_colors'][0],
            linewidth=2.5, label=result.constants.name)
    ax.plot(result.x, result.y, '.', color=STYLE['accent_colors'][0],
            markersize=3, alpha=0.5)

    ax.plot(0, result.y[0], 'o', color='#00e676', markersize=10,
            label='Launch', zorder=5)
    ax.plot(result.x[-1], result.y[-1], 'x', color='#ff5252',
            markersize=12, markeredgewidth=3, label='Landing', zorder=5)

    idx_max = int(np.argmax(result.y))
    ax.plot(result.x[idx_max], result.y[idx_max], '^', color='#ffeb3b',
            markersize=10, label='Apex', zorder=5)

    frame = 'relative to launch' if result.normalized else 'above sea level'
    ax.set_xlabel('Downrange (m)', fontsize=12)
    ax.set_ylabel(f'Altitude (m, {frame})', fontsize=12)
    ax.set_title(f'Trajectory — {result.constants.name} '
                 f'(h₀={result.initial_altitude:.0f} m, '
                 f'v₀={result.initial_velocity:.0f} m/s, '
                 f'θ={result.angle_deg:.0f}°, dt={result.dt} s)',
                 fontsize=13, fontweight='bold')
    _legend(ax, loc='upper right', fontsize=10)

    _save(fig, save_path)
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Profile Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_profile_comparison(results: Dict[str, TrajectoryResult],
                            save_path: str = None) -> plt.Figure:
    """Trajectories and speed histories for several projectile profiles."""
    fig, (ax_traj, ax_speed) = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, np.array([ax_traj, ax_speed]))

    for (label, result), color in zip(results.items(), STYLE['accent_colors']):
        ax_traj.plot(result.x, result.y, color=color, linewidth=2, label=label)
        ax_speed.plot(result.time, result.speed, color=color, linewidth=2,
                      label=label)

    ax_traj.set_xlabel('Downrange (m)')
    ax_traj.set_ylabel('Altitude (m)')
    ax_traj.set_title('Trajectory', fontweight='bold')
    _legend(ax_traj)

    ax_speed.set_xlabel('Time (s)')
    ax_speed.set_ylabel('Speed (m/s)')
    ax_speed.set_title('Speed', fontweight='bold')
    _legend(ax_speed)

    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Cd vs Reynolds Number
# ══════════════════════════════════════════════════════════════════════════

def plot_cd_vs_reynolds(save_path: str = None) -> plt.Figure:
    """Sphere drag coefficient over the full Reynolds number range."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    re = np.logspace(-1, 7, 1000)
    ax.loglog(re, cd_sphere_array(re), color=STYLE['accent_colors'][0],
              linewidth=2.5, label='Sphere')

    for limit in REYNOLDS_BANDS[1:]:
        ax.axvline(limit, color='#555', linestyle='--', alpha=0.6)
    ax.axvspan(3e5, 2e6, alpha=0.08, color='#ff5252')
    ax.text(8e5, 0.08, 'Drag\ncrisis', ha='center',
            color='#ff5252', fontsize=10, alpha=0.7)

    ax.set_xlabel('Reynolds Number', fontsize=12)
    ax.set_ylabel('Drag Coefficient (Cd)', fontsize=12)
    ax.set_title('Sphere Drag Coefficient vs Reynolds Number',
                 fontsize=14, fontweight='bold')
    _legend(ax, fontsize=11)

    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Atmosphere Profile
# ══════════════════════════════════════════════════════════════════════════

def plot_atmosphere(save_path: str = None) -> plt.Figure:
    """Atmosphere ratios and viscosity from 0 to 25 km."""
    altitudes = np.linspace(0.0, 25.0, 500)
    profile = atmosphere_profile(altitudes)

    fig, axes = plt.subplots(1, 4, figsize=(18, 7), sharey=True)
    _apply_dark_style(fig, axes)

    params = [
        ('Density ratio σ', profile['sigma'], '#00e676'),
        ('Pressure ratio δ', profile['delta'], '#00d4ff'),
        ('Temperature ratio θ', profile['theta'], '#ff6b35'),
        ('Viscosity (kg/m·s)', profile['viscosity'], '#ffeb3b'),
    ]

    for ax, (title, data, color) in zip(axes, params):
        ax.plot(data, altitudes, color=color, linewidth=2)
        ax.set_xlabel(title, fontsize=10)
        ax.axhspan(20.0, 25.0, alpha=0.08, color='#ff5252')

    axes[0].set_ylabel('Geometric altitude (km)', fontsize=12)
    fig.suptitle('Simplified Standard Atmosphere (approximate above 20 km)',
                 fontsize=14, fontweight='bold', color=STYLE['text_color'])
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  5. Animated Scene (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_scene_animation(scene, launcher, save_path: str = 'outputs/scene.gif',
                           frames: int = 200, fire_every: int = 25) -> str:
    """
    Drive a Scene for a number of frames, firing from the launcher every
    `fire_every` frames, and save the result as an animated GIF.
    """
    from matplotlib.animation import FuncAnimation, PillowWriter

    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    preview = launcher.trajectory
    xmax = max(scene.config.spawn_x + scene.config.target_size,
               preview.range_total) * 1.05
    ymax = max(scene.config.target_altitude + scene.config.target_amplitude
               + scene.config.target_size, preview.max_altitude) * 1.15
    ax.set_xlim(-20, xmax)
    ax.set_ylim(0, ymax)
    ax.set_xlabel('Downrange (m)', color=STYLE['text_color'], fontsize=12)
    ax.set_ylabel('Altitude (m)', color=STYLE['text_color'], fontsize=12)
    ax.set_title('Live Projectiles vs Target', color=STYLE['text_color'],
                 fontsize=14, fontweight='bold')

    ax.plot(preview.x, preview.y, '--', color='#555', linewidth=1)
    shots, = ax.plot([], [], 'o', color='#00d4ff', markersize=6)
    target_patch = Rectangle((0, 0), 0, 0, fill=False,
                             edgecolor='#ff6b35', linewidth=2)
    ax.add_patch(target_patch)
    status = ax.text(0.02, 0.95, '', transform=ax.transAxes,
                     color=STYLE['text_color'], fontsize=11,
                     fontfamily='monospace')

    def animate(frame_idx):
        if frame_idx % fire_every == 0:
            scene.fire_from(launcher)
        report = scene.step()

        xs = [p.point.position[0] for p in scene.projectiles]
        ys = [p.point.position[1] for p in scene.projectiles]
        shots.set_data(xs, ys)
        if scene.target is not None:
            b = scene.target.bounds.normalized()
            target_patch.set_xy(b.min)
            target_patch.set_width(b.width)
            target_patch.set_height(b.height)
        status.set_text(f'frame={report.frame} | active={report.active} | '
                        f'hits={scene.hits}')
        return shots, target_patch, status

    def init():
        shots.set_data([], [])
        return shots, target_patch, status

    anim = FuncAnimation(fig, animate, frames=frames, init_func=init,
                         interval=50, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=20),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    print(f"  Animation saved: {save_path}")
    return save_path
