"""
Grid Map - rectangular tile grid of integer cell codes
Row-major, origin top-left. 0 = empty, any positive code = solid material.
"""

import logging
import math
import numpy as np
from utils.constants import CELL_SIZE, EMPTY_CELL

logger = logging.getLogger(__name__)


class GridMap:
    """
    Tile grid shared by the collision resolver and the ray engine.

    Coordinates outside [0, width) x [0, height) are solid: rays and
    players can never leave the bounded world, and every DDA traversal
    terminates once it steps off the grid.
    """

    def __init__(self, width, height, cells, cell_size=CELL_SIZE):
        """
        Args:
            width, height: Grid dimensions in cells
            cells: Flat sequence of width*height cell codes, row-major
            cell_size: World units per cell, a number or a (w, h) pair
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        if len(cells) != width * height:
            raise ValueError(
                f"Expected {width * height} cells for a {width}x{height} grid, got {len(cells)}"
            )

        self.width = int(width)
        self.height = int(height)

        if isinstance(cell_size, (tuple, list)):
            cell_w, cell_h = cell_size
        else:
            cell_w = cell_h = cell_size
        if cell_w <= 0 or cell_h <= 0:
            raise ValueError(f"Cell size must be positive, got {cell_size!r}")
        self.cell_w = float(cell_w)
        self.cell_h = float(cell_h)

        # int64 keeps the array directly usable by the numba kernels
        self.cells = np.array(cells, dtype=np.int64).reshape(-1)
        if (self.cells < 0).any():
            raise ValueError("Cell codes must be non-negative")

    @classmethod
    def from_rows(cls, rows, cell_size=CELL_SIZE):
        """
        Build a grid from a list of equally long rows

        Args:
            rows: Sequence of rows, each a sequence of cell codes
            cell_size: World units per cell
        """
        rows = [list(row) for row in rows]
        if not rows:
            raise ValueError("Grid needs at least one row")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} cells, expected {width}")
        cells = [value for row in rows for value in row]
        return cls(width, len(rows), cells, cell_size)

    @property
    def cell_size(self):
        return self.cell_w, self.cell_h

    @property
    def world_width(self):
        return self.width * self.cell_w

    @property
    def world_height(self):
        return self.height * self.cell_h

    def idx(self, cell_x, cell_y):
        """Convert 2D cell coordinates to the flat index"""
        return cell_y * self.width + cell_x

    def in_bounds(self, cell_x, cell_y):
        """Check if cell coordinates are within the grid"""
        return 0 <= cell_x < self.width and 0 <= cell_y < self.height

    def is_solid(self, cell_x, cell_y):
        """Solid test; anything outside the grid counts as solid"""
        if not self.in_bounds(cell_x, cell_y):
            return True
        return self.cells[self.idx(cell_x, cell_y)] != EMPTY_CELL

    def value_at(self, cell_x, cell_y):
        """Cell code, or 0 (no material) outside the grid"""
        if not self.in_bounds(cell_x, cell_y):
            return EMPTY_CELL
        return int(self.cells[self.idx(cell_x, cell_y)])

    def paint(self, cell_x, cell_y, value):
        """
        Overwrite one cell code. Out-of-range coordinates are ignored.

        Must only be called between fan casts (see game.simulation).
        """
        if value < 0:
            raise ValueError(f"Cell codes must be non-negative, got {value}")
        if not self.in_bounds(cell_x, cell_y):
            logger.debug("Ignoring paint outside grid at (%s, %s)", cell_x, cell_y)
            return
        self.cells[self.idx(cell_x, cell_y)] = value

    def cell_of(self, x, y):
        """World position -> containing cell coordinates"""
        return int(math.floor(x / self.cell_w)), int(math.floor(y / self.cell_h))

    def is_solid_at(self, x, y):
        """Solid test for a world position"""
        return self.is_solid(*self.cell_of(x, y))

    def cell_center(self, cell_x, cell_y):
        """World position of a cell's center"""
        return (cell_x + 0.5) * self.cell_w, (cell_y + 0.5) * self.cell_h

    def rows(self):
        """Iterate rows as lists of ints, top to bottom"""
        for y in range(self.height):
            start = y * self.width
            yield [int(v) for v in self.cells[start:start + self.width]]

    def to_text(self, separator=","):
        """Serialize in the level source format (single-digit codes only)"""
        if int(self.cells.max()) > 9:
            raise ValueError("Level source format only holds cell codes 0-9")
        return "\n".join(separator.join(str(v) for v in row) for row in self.rows()) + "\n"

    def copy(self):
        return GridMap(self.width, self.height, self.cells.copy(), (self.cell_w, self.cell_h))

    def __eq__(self, other):
        if not isinstance(other, GridMap):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and self.cell_size == other.cell_size
                and np.array_equal(self.cells, other.cells))

    def __repr__(self):
        return f"GridMap({self.width}x{self.height}, cell={self.cell_w:g}x{self.cell_h:g})"
