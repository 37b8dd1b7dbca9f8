"""
Core wave engine.

This layer knows NOTHING about plotting or windows.
It only knows:
- The grid layout (cell identities and initial positions)
- The per-frame wave field (envelope, phase stagger, displacement)
- The edge-triggered peak/trough color state machine

A host supplies a clock and calls WaveField.step() once per frame.
"""

from wavegrid.core.grid import Cell, CellGrid, GridConfig, GridLayout
from wavegrid.core.envelope import temporal_envelope, vertical_amplitude, row_phase_offset
from wavegrid.core.color import ColorState, classify, classify_array, PEAK_THRESHOLD, TROUGH_THRESHOLD
from wavegrid.core.wave_field import WaveField, WaveParameters, CellFrame, RenderTarget

__all__ = [
    "Cell",
    "CellGrid",
    "GridConfig",
    "GridLayout",
    "temporal_envelope",
    "vertical_amplitude",
    "row_phase_offset",
    "ColorState",
    "classify",
    "classify_array",
    "PEAK_THRESHOLD",
    "TROUGH_THRESHOLD",
    "WaveField",
    "WaveParameters",
    "CellFrame",
    "RenderTarget",
]
