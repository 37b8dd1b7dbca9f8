"""
Grid layout: the stable 2D arrangement of cells.

The layout is computed ONCE at initialization:
- (row, col) → initial 3D position, centered around the origin
- Rows run along z, columns along x, y is always 0

Each cell is a single record holding its own position, its last sine
sample and an optional handle to the host's render object. There are no
parallel arrays keyed by (row, col).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterator
import logging

import numpy as np

logger = logging.getLogger(__name__)

RGB = tuple[float, float, float]


@dataclass(frozen=True)
class GridConfig:
    """Configuration for the cell grid. Fixed once created."""

    rows: int = 100  # Cells along z
    columns: int = 100  # Cells along x
    spacing: float = 1.0  # Distance between neighbouring cells

    def __post_init__(self):
        # Invalid sizes are corrected, not rejected
        if self.rows < 1:
            logger.warning("rows=%s clamped to 1", self.rows)
            object.__setattr__(self, "rows", 1)
        if self.columns < 1:
            logger.warning("columns=%s clamped to 1", self.columns)
            object.__setattr__(self, "columns", 1)


@dataclass
class Cell:
    """One grid element."""

    row: int
    col: int
    initial_position: np.ndarray
    previous_sine: float = 0.0
    color: RGB = (1.0, 1.0, 1.0)
    handle: Any = None  # Host render object, if any
    active: bool = True

    def __post_init__(self):
        self.initial_position = np.array(self.initial_position, dtype=np.float64)
        self.initial_position.setflags(write=False)

    @property
    def index(self) -> tuple[int, int]:
        return self.row, self.col


class CellGrid:
    """
    Arena of Cell records, indexed by (row, col) or flat row-major index.
    """

    def __init__(self, rows: int, columns: int, cells: list[Cell]):
        if len(cells) != rows * columns:
            raise ValueError("CellGrid needs exactly rows * columns cells")
        self.rows = rows
        self.columns = columns
        self._cells = cells

    @property
    def shape(self) -> tuple[int, int]:
        """Return (rows, columns)."""
        return self.rows, self.columns

    def _flat(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.columns):
            raise KeyError((row, col))
        return row * self.columns + col

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __getitem__(self, key: int | tuple[int, int]) -> Cell:
        if isinstance(key, tuple):
            return self._cells[self._flat(*key)]
        return self._cells[key]

    def get(self, row: int, col: int) -> Cell | None:
        """Cell at (row, col), or None when out of range."""
        if 0 <= row < self.rows and 0 <= col < self.columns:
            return self._cells[row * self.columns + col]
        return None

    def attach(self, row: int, col: int, handle: Any) -> None:
        """
        Bind a host render object to a cell and mark it present.

        The handle is brought up to date with the cell: it receives the
        initial position and the current color.
        """
        cell = self[row, col]
        cell.handle = handle
        cell.active = True
        handle.set_position(cell.initial_position.copy())
        handle.set_color(cell.color)

    def release(self, row: int, col: int) -> None:
        """
        Mark a cell as absent (its render object was destroyed by the host).

        Released cells keep their last state and are skipped by the wave step.
        """
        cell = self[row, col]
        cell.handle = None
        cell.active = False
        logger.debug("cell (%d, %d) released", row, col)

    def active_count(self) -> int:
        return sum(1 for cell in self._cells if cell.active)


class GridLayout:
    """
    Computes cell positions for a GridConfig.

    Position for (row, col):
        x = col * spacing - offset_x
        y = 0
        z = row * spacing - offset_z
    with offset_x = (columns - 1) * spacing / 2 and
    offset_z = (rows - 1) * spacing / 2.
    """

    def __init__(self, config: GridConfig | None = None):
        self.config = config if config is not None else GridConfig()

    @property
    def shape(self) -> tuple[int, int]:
        """Return (rows, columns)."""
        return self.config.rows, self.config.columns

    @property
    def offsets(self) -> tuple[float, float]:
        """Centering offsets (offset_x, offset_z)."""
        cfg = self.config
        offset_x = (cfg.columns - 1) * cfg.spacing * 0.5
        offset_z = (cfg.rows - 1) * cfg.spacing * 0.5
        return offset_x, offset_z

    def iter_cells(self) -> Iterator[tuple[int, int]]:
        """Iterate over all (row, col) coordinates, row-major."""
        for row in range(self.config.rows):
            for col in range(self.config.columns):
                yield row, col

    def position(self, row: int, col: int) -> np.ndarray:
        """Initial position of a single cell."""
        offset_x, offset_z = self.offsets
        spacing = self.config.spacing
        return np.array(
            [col * spacing - offset_x, 0.0, row * spacing - offset_z],
            dtype=np.float64,
        )

    def initialize(self) -> dict[tuple[int, int], np.ndarray]:
        """Mapping (row, col) → initial position for every cell."""
        return {
            (row, col): self.position(row, col)
            for row, col in self.iter_cells()
        }

    def positions_array(self) -> np.ndarray:
        """All initial positions as an array of shape (rows, columns, 3)."""
        rows, columns = self.shape
        spacing = self.config.spacing
        offset_x, offset_z = self.offsets

        positions = np.zeros((rows, columns, 3), dtype=np.float64)
        positions[..., 0] = np.arange(columns)[None, :] * spacing - offset_x
        positions[..., 2] = np.arange(rows)[:, None] * spacing - offset_z
        return positions

    def build_cells(self, base_color: RGB = (1.0, 1.0, 1.0)) -> CellGrid:
        """Create the cell arena, every cell starting at base_color."""
        cells = [
            Cell(row=row, col=col, initial_position=self.position(row, col), color=base_color)
            for row, col in self.iter_cells()
        ]
        rows, columns = self.shape
        logger.debug("built %dx%d cell grid", rows, columns)
        return CellGrid(rows, columns, cells)
