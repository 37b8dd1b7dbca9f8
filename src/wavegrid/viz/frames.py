"""
Matplotlib host for the wave field.

Stands in for the render engine: draws each cell as a marker at its
displaced position, colored with its current color, and drives the
per-frame step from a monotonic animation clock.

Two views are available:
- "top":  seen from above, x horizontal, z vertical
- "side": seen along x, z horizontal, displacement vertical; the columns
          of a row overlap, so the wave profile across rows is visible
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from wavegrid.core.envelope import temporal_envelope, vertical_amplitude

if TYPE_CHECKING:
    from wavegrid.core.wave_field import WaveField, WaveParameters


BACKGROUND = (0.08, 0.08, 0.10)

View = Literal["top", "side"]
VIEWS = ("top", "side")


def _view_points(field: "WaveField", view: View) -> np.ndarray:
    """Marker coordinates (N, 2) for the given view, row-major cell order."""
    positions = field.displaced_positions().reshape(-1, 3)
    if view == "top":
        return positions[:, [0, 2]]
    initial = field.layout.positions_array().reshape(-1, 3)
    return np.column_stack([positions[:, 2], positions[:, 0] - initial[:, 0]])


def _style_axes(ax: Axes, field: "WaveField", view: View) -> None:
    """Fixed limits that fit the largest possible displacement, plus labels."""
    offset_x, offset_z = field.layout.offsets
    pad = field.layout.config.spacing * 0.5
    reach = max(abs(field.params.max_amplitude), abs(field.params.min_amplitude))

    if view == "top":
        ax.set_xlim(-offset_x - reach - pad, offset_x + reach + pad)
        ax.set_ylim(-offset_z - pad, offset_z + pad)
        ax.set_aspect("equal")
        ax.set_xlabel("x")
        ax.set_ylabel("z")
    else:
        ax.set_xlim(-offset_z - pad, offset_z + pad)
        ax.set_ylim(-reach - pad, reach + pad)
        ax.set_xlabel("z")
        ax.set_ylabel("displacement")
    ax.set_facecolor(BACKGROUND)


def plot_frame(
    field: "WaveField",
    title: str = "",
    ax: Axes | None = None,
    view: View = "top",
    marker_size: float = 12.0,
    figsize: tuple[float, float] = (8, 8),
) -> tuple[Figure, Axes]:
    """
    Plot the grid as left by the field's last step.

    Args:
        field: Wave field to draw
        title: Plot title
        ax: Existing axes to plot on (creates new figure if None)
        view: "top" or "side"
        marker_size: Scatter marker size
        figsize: Figure size if creating new figure

    Returns:
        (fig, ax) tuple
    """
    if view not in VIEWS:
        raise ValueError(f"Unknown view {view!r}, expected one of {VIEWS}")

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    points = _view_points(field, view)
    colors = field.color_array().reshape(-1, 3)
    ax.scatter(points[:, 0], points[:, 1], c=colors, s=marker_size, linewidths=0)

    _style_axes(ax, field, view)
    ax.set_title(title)

    return fig, ax


def plot_envelope(
    params: "WaveParameters",
    rows: int,
    duration: float | None = None,
    n_samples: int = 400,
    ax: Sequence[Axes] | None = None,
    figsize: tuple[float, float] = (12, 4),
) -> tuple[Figure, tuple[Axes, Axes]]:
    """
    Plot the temporal envelope E(t) and the vertical factor V(row).

    Args:
        params: Wave parameters
        rows: Number of grid rows
        duration: Time span for E(t) (defaults to two envelope periods)
        n_samples: Samples along the time axis
        ax: Existing (time, rows) pair of axes (creates new figure if None)
        figsize: Figure size if creating new figure

    Returns:
        (fig, (ax_time, ax_rows)) tuple
    """
    if duration is None:
        duration = 2.0 * params.envelope_period

    if ax is None:
        fig, (ax_time, ax_rows) = plt.subplots(1, 2, figsize=figsize)
    else:
        ax_time, ax_rows = ax
        fig = ax_time.figure

    t = np.linspace(0.0, duration, n_samples)
    env = temporal_envelope(t, params.min_amplitude, params.max_amplitude, params.envelope_period)
    ax_time.plot(t, env, color="tab:blue")
    ax_time.axhline(params.min_amplitude, color="gray", linestyle="--", linewidth=0.8)
    ax_time.axhline(params.max_amplitude, color="gray", linestyle="--", linewidth=0.8)
    ax_time.set_xlabel("t [s]")
    ax_time.set_ylabel("E(t)")
    ax_time.set_title("Temporal envelope")

    row_idx = np.arange(rows)
    factor = np.atleast_1d(vertical_amplitude(row_idx, rows, params.vertical_amplitude_mod))
    ax_rows.plot(row_idx, factor, "o-", color="tab:orange", markersize=3)
    ax_rows.set_xlabel("row")
    ax_rows.set_ylabel("V(row)")
    ax_rows.set_title("Vertical amplitude factor")

    if ax is None:
        fig.tight_layout()
    return fig, (ax_time, ax_rows)


def animate_field(
    field: "WaveField",
    n_frames: int = 240,
    fps: float = 30.0,
    view: View = "top",
    marker_size: float = 12.0,
    figsize: tuple[float, float] = (8, 8),
) -> tuple[Figure, FuncAnimation]:
    """
    Animate the field: frame k is stepped at elapsed time k / fps.

    Frame 0 is stepped here and drawn by the init function; the animation
    then steps frames 1 .. n_frames - 1, each exactly once. Keep a
    reference to the returned animation while it plays or saves.
    """
    if view not in VIEWS:
        raise ValueError(f"Unknown view {view!r}, expected one of {VIEWS}")

    fig, ax = plt.subplots(figsize=figsize)

    field.step(0.0)
    points = _view_points(field, view)
    scatter = ax.scatter(
        points[:, 0],
        points[:, 1],
        c=field.color_array().reshape(-1, 3),
        s=marker_size,
        linewidths=0,
    )
    _style_axes(ax, field, view)
    title = ax.set_title("t = 0.00 s")

    def init():
        return scatter, title

    def update(frame: int):
        t = frame / fps
        field.step(t)
        scatter.set_offsets(_view_points(field, view))
        scatter.set_facecolors(field.color_array().reshape(-1, 3))
        title.set_text(f"t = {t:.2f} s")
        return scatter, title

    anim = FuncAnimation(
        fig,
        update,
        frames=range(1, n_frames),
        init_func=init,
        interval=1000.0 / fps,
        blit=False,
        repeat=False,
    )
    return fig, anim


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
