"""
WaveField: per-frame evaluation of the traveling wave and cell colors.

Each step(t):
1. E(t) is computed once for the frame
2. Per row: A(row) = E(t) * V(row), phase = wave_speed * t - row * wave_density
3. Per cell: s = sin(phase), displacement d = A(row) * s along x
4. Color transition from (s, previous_sine), then previous_sine = s

Cells never read each other's current-frame state; the only state carried
between frames is each cell's previous_sine (and its current color).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, Sequence
import logging

import numpy as np
import matplotlib.colors as mcolors

from wavegrid.core.color import NO_CHANGE, ColorState, classify_array
from wavegrid.core.envelope import row_phase_offset, temporal_envelope, vertical_amplitude
from wavegrid.core.grid import RGB, Cell, CellGrid, GridConfig, GridLayout

logger = logging.getLogger(__name__)

# Index of the axis the displacement is applied to (x)
DISPLACEMENT_AXIS = 0


@dataclass(frozen=True)
class WaveParameters:
    """
    Wave and color configuration. Fixed once created.

    Colors accept any matplotlib color spec ("white", "#ff0000", (r, g, b))
    and are stored as RGB float tuples.
    """

    wave_speed: float = 3.0  # Phase speed (rad/s)
    envelope_period: float = 8.0  # Seconds per full envelope cycle, must be > 0
    min_amplitude: float = 0.5
    max_amplitude: float = 2.0
    wave_density: float = 0.5  # Phase stagger per row (rad)
    vertical_amplitude_mod: float = 0.7  # Amplitude floor for edge rows
    base_color: RGB | str = "white"
    peak_color: RGB | str = "blue"
    trough_color: RGB | str = "yellow"

    def __post_init__(self):
        for name in ("base_color", "peak_color", "trough_color"):
            object.__setattr__(self, name, mcolors.to_rgb(getattr(self, name)))

    def color_for(self, state: ColorState) -> RGB:
        """RGB color for a logical color state."""
        if state is ColorState.PEAK:
            return self.peak_color
        if state is ColorState.TROUGH:
            return self.trough_color
        return self.base_color


class RenderTarget(Protocol):
    """Host-side render object attached to a cell."""

    def set_position(self, position: np.ndarray) -> None:
        ...

    def set_color(self, color: RGB) -> None:
        ...


@dataclass
class CellFrame:
    """Output of one cell for one frame."""

    row: int
    col: int
    position: np.ndarray  # Displaced position
    displacement: float
    sine: float
    transition: ColorState | None  # None: color unchanged this frame
    color: RGB  # Color after this frame


class WaveField:
    """
    Drives the cell grid one frame at a time.

    The host calls step() once per frame with a non-decreasing elapsed time
    and applies the returned positions and colors to its own objects.
    """

    def __init__(
        self,
        layout: GridLayout | GridConfig | None = None,
        params: WaveParameters | None = None,
    ):
        if not isinstance(layout, GridLayout):
            layout = GridLayout(layout)
        self.layout = layout
        self.params = params if params is not None else WaveParameters()
        self.cells: CellGrid = layout.build_cells(self.params.base_color)

        rows, columns = layout.shape
        self._displacement = np.zeros((rows, columns), dtype=np.float64)

        self.frame_count = 0
        self.last_time: float | None = None

        # Per-row constants: computed once, reused every frame
        row_idx = np.arange(rows)
        self._vertical = np.atleast_1d(
            vertical_amplitude(row_idx, rows, self.params.vertical_amplitude_mod)
        )
        self._phase_offset = np.atleast_1d(row_phase_offset(row_idx, self.params.wave_density))

    @property
    def shape(self) -> tuple[int, int]:
        """Return (rows, columns)."""
        return self.layout.shape

    def envelope(self, elapsed_time: float) -> float:
        """Temporal envelope E(t) for this field's parameters."""
        p = self.params
        return temporal_envelope(elapsed_time, p.min_amplitude, p.max_amplitude, p.envelope_period)

    def row_amplitudes(self, elapsed_time: float) -> np.ndarray:
        """A(row) = E(t) * V(row) for every row."""
        return self.envelope(elapsed_time) * self._vertical

    def row_sines(self, elapsed_time: float) -> np.ndarray:
        """sin(wave_speed * t - φ(row)) for every row."""
        phase = self.params.wave_speed * elapsed_time - self._phase_offset
        return np.sin(phase)

    def sample(self, elapsed_time: float) -> np.ndarray:
        """
        Displacement field of shape (rows, columns) at elapsed_time.

        Pure function of time: no cell state is touched.
        """
        _, columns = self.shape
        per_row = self.row_amplitudes(elapsed_time) * self.row_sines(elapsed_time)
        return np.repeat(per_row[:, None], columns, axis=1)

    def step(self, elapsed_time: float) -> list[CellFrame]:
        """
        Advance one frame.

        Returns one CellFrame per active cell. Released cells are skipped
        and keep their last state.
        """
        if self.last_time is not None and elapsed_time < self.last_time:
            logger.debug("time went backwards: %s < %s", elapsed_time, self.last_time)

        _, columns = self.shape
        amplitudes = self.row_amplitudes(elapsed_time)
        sines = self.row_sines(elapsed_time)

        # Color decisions for the whole grid, read from last frame's samples
        codes = classify_array(
            np.repeat(sines[:, None], columns, axis=1),
            self.previous_sines(),
        )

        frames = []
        for cell in self.cells:
            if not cell.active:
                continue
            code = int(codes[cell.row, cell.col])
            transition = None if code == NO_CHANGE else ColorState(code)
            frames.append(
                self._update_cell(cell, float(amplitudes[cell.row]), float(sines[cell.row]), transition)
            )

        self.frame_count += 1
        self.last_time = elapsed_time
        return frames

    def _update_cell(
        self,
        cell: Cell,
        amplitude: float,
        sine: float,
        transition: ColorState | None,
    ) -> CellFrame:
        displacement = amplitude * sine
        position = cell.initial_position.copy()
        position[DISPLACEMENT_AXIS] += displacement
        self._displacement[cell.row, cell.col] = displacement

        if transition is not None:
            cell.color = self.params.color_for(transition)

        if cell.handle is not None:
            cell.handle.set_position(position)
            if transition is not None:
                cell.handle.set_color(cell.color)

        cell.previous_sine = sine
        return CellFrame(
            row=cell.row,
            col=cell.col,
            position=position,
            displacement=displacement,
            sine=sine,
            transition=transition,
            color=cell.color,
        )

    def run(self, times: Sequence[float]) -> list[list[CellFrame]]:
        """Step through a sequence of elapsed times."""
        return [self.step(t) for t in times]

    def displaced_positions(self) -> np.ndarray:
        """Positions as of the last step, shape (rows, columns, 3)."""
        positions = self.layout.positions_array()
        positions[..., DISPLACEMENT_AXIS] += self._displacement
        return positions

    def color_array(self) -> np.ndarray:
        """Current cell colors, shape (rows, columns, 3)."""
        rows, columns = self.shape
        colors = np.array([cell.color for cell in self.cells], dtype=np.float64)
        return colors.reshape(rows, columns, 3)

    def previous_sines(self) -> np.ndarray:
        """Each cell's stored sine sample, shape (rows, columns)."""
        rows, columns = self.shape
        return np.array([cell.previous_sine for cell in self.cells]).reshape(rows, columns)

    def reset(self):
        """Return every cell to its initial state."""
        base = self.params.base_color
        for cell in self.cells:
            cell.previous_sine = 0.0
            cell.color = base
            if cell.handle is not None:
                cell.handle.set_position(cell.initial_position.copy())
                cell.handle.set_color(base)
        self._displacement.fill(0.0)
        self.frame_count = 0
        self.last_time = None
