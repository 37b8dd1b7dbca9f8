"""
Visualization host.

- Top-down frame plots of the grid
- Envelope / vertical factor profiles
- Frame-by-frame animation driven by WaveField.step
"""

from wavegrid.viz.frames import (
    plot_frame,
    plot_envelope,
    animate_field,
    save_figure,
)

__all__ = [
    "plot_frame",
    "plot_envelope",
    "animate_field",
    "save_figure",
]
