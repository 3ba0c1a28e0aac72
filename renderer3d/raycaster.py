"""
Raycaster Engine - first wall hit along a ray through the tile grid
Two strategies share one contract: exact grid stepping (DDA) and
fixed-step linear marching. Inner loops are compiled with Numba.
"""

import logging
import math
from enum import IntEnum
import numpy as np
from numba import njit
from utils.constants import (
    X_BOUNDARY, Y_BOUNDARY, STRATEGY_DDA, STRATEGY_MARCH, STRATEGIES,
    MAX_DRAW_DISTANCE, MARCH_STEPS
)
from utils.helpers import normalize

logger = logging.getLogger(__name__)

# Columns of the fan result array
COL_DIST = 0
COL_SIDE = 1
COL_CELL_X = 2
COL_CELL_Y = 3
COL_VALUE = 4
COL_STEPS = 5
COL_HIT = 6
RESULT_COLS = 7


class HitSide(IntEnum):
    """Which family of grid lines the ray crossed into the struck cell"""
    X_BOUNDARY = X_BOUNDARY  # vertical line, x = const
    Y_BOUNDARY = Y_BOUNDARY  # horizontal line, y = const


@njit(cache=True)
def _dda_trace(cells, width, height, cell_w, cell_h, ox, oy, dx, dy, max_steps):
    """
    Grid-stepping traversal (Numba JIT compiled)

    Args:
        cells: 1D int64 array of cell codes, row-major
        width, height: Grid dimensions
        cell_w, cell_h: World units per cell
        ox, oy: Ray origin (world units)
        dx, dy: Unit direction, not both zero
        max_steps: Safety bound on grid-line crossings

    Returns:
        (distance, side, cell_x, cell_y, value, steps, hit)
    """
    # Starting cell, clamped for the first lookup only
    raw_cx = int(math.floor(ox / cell_w))
    raw_cy = int(math.floor(oy / cell_h))
    cx = raw_cx
    cy = raw_cy
    if cx < 0:
        cx = 0
    elif cx > width - 1:
        cx = width - 1
    if cy < 0:
        cy = 0
    elif cy > height - 1:
        cy = height - 1

    # Per-axis length to cross one cell, and to the first boundary
    if dx > 0.0:
        step_x = 1
        delta_x = cell_w / dx
        len_x = ((cx + 1) * cell_w - ox) / dx
    elif dx < 0.0:
        step_x = -1
        delta_x = cell_w / -dx
        len_x = (cx * cell_w - ox) / dx
    else:
        step_x = 0
        delta_x = np.inf
        len_x = np.inf

    if dy > 0.0:
        step_y = 1
        delta_y = cell_h / dy
        len_y = ((cy + 1) * cell_h - oy) / dy
    elif dy < 0.0:
        step_y = -1
        delta_y = cell_h / -dy
        len_y = (cy * cell_h - oy) / dy
    else:
        step_y = 0
        delta_y = np.inf
        len_y = np.inf

    # Origin outside its clamped cell
    if len_x < 0.0:
        len_x = 0.0
    if len_y < 0.0:
        len_y = 0.0

    # Origin outside the grid: the clamped cell gets one lookup of its own
    if raw_cx != cx or raw_cy != cy:
        value = cells[cy * width + cx]
        if value != 0:
            enter_x = 0.0
            enter_y = 0.0
            if raw_cx != cx and dx != 0.0:
                face_x = cx * cell_w if dx > 0.0 else (cx + 1) * cell_w
                enter_x = max(0.0, (face_x - ox) / dx)
            if raw_cy != cy and dy != 0.0:
                face_y = cy * cell_h if dy > 0.0 else (cy + 1) * cell_h
                enter_y = max(0.0, (face_y - oy) / dy)
            if enter_x > enter_y:
                return enter_x, 0, cx, cy, value, 0, True
            return enter_y, 1, cx, cy, value, 0, True

    dist = 0.0
    side = 0
    steps = 0
    while steps < max_steps:
        if len_x < len_y:
            dist = len_x
            len_x += delta_x
            cx += step_x
            side = 0
        else:
            dist = len_y
            len_y += delta_y
            cy += step_y
            side = 1
        steps += 1

        # Outside the grid is solid
        if cx < 0 or cx >= width or cy < 0 or cy >= height:
            return dist, side, cx, cy, 0, steps, True

        value = cells[cy * width + cx]
        if value != 0:
            return dist, side, cx, cy, value, steps, True

    return dist, side, cx, cy, 0, steps, False


@njit(cache=True)
def _march_trace(cells, width, height, cell_w, cell_h, ox, oy, dx, dy,
                 max_distance, step_count, edge_tolerance):
    """
    Fixed-step linear marching (Numba JIT compiled)

    Samples step_count equally spaced points up to max_distance and stops
    at the first sample inside a solid cell. The hit side is inferred
    from which cell coordinate changed, falling back to the nearest cell
    edge when both changed.

    Returns:
        (distance, side, cell_x, cell_y, value, steps, hit)
    """
    step_len = max_distance / step_count

    prev_cx = int(math.floor(ox / cell_w))
    prev_cy = int(math.floor(oy / cell_h))

    for k in range(1, step_count + 1):
        t = k * step_len
        x = ox + dx * t
        y = oy + dy * t
        cx = int(math.floor(x / cell_w))
        cy = int(math.floor(y / cell_h))

        outside = cx < 0 or cx >= width or cy < 0 or cy >= height
        value = 0
        if not outside:
            value = cells[cy * width + cx]

        if outside or value != 0:
            if cx != prev_cx and cy == prev_cy:
                side = 0
            elif cy != prev_cy and cx == prev_cx:
                side = 1
            else:
                fx = x / cell_w - cx
                fy = y / cell_h - cy
                edge_x = min(fx, 1.0 - fx) * cell_w
                edge_y = min(fy, 1.0 - fy) * cell_h
                if edge_x <= edge_y + edge_tolerance:
                    side = 0
                else:
                    side = 1
            return t, side, cx, cy, value, k, True

        prev_cx = cx
        prev_cy = cy

    return max_distance, 0, prev_cx, prev_cy, 0, step_count, False


@njit(cache=True)
def _dda_cast_fan(cells, width, height, cell_w, cell_h, ox, oy, dirs_x, dirs_y, max_steps):
    """
    Cast every ray of a fan with the DDA trace (Numba JIT compiled)

    Returns:
        numpy array shape (num_rays, 7):
        [dist, side, cell_x, cell_y, value, steps, hit]
    """
    num_rays = dirs_x.shape[0]
    results = np.empty((num_rays, 7), dtype=np.float64)
    for i in range(num_rays):
        dist, side, cx, cy, value, steps, hit = _dda_trace(
            cells, width, height, cell_w, cell_h, ox, oy, dirs_x[i], dirs_y[i], max_steps
        )
        results[i, 0] = dist
        results[i, 1] = side
        results[i, 2] = cx
        results[i, 3] = cy
        results[i, 4] = value
        results[i, 5] = steps
        results[i, 6] = 1.0 if hit else 0.0
    return results


@njit(cache=True)
def _march_cast_fan(cells, width, height, cell_w, cell_h, ox, oy, dirs_x, dirs_y,
                    max_distance, step_count, edge_tolerance):
    """
    Cast every ray of a fan with the marching trace (Numba JIT compiled)

    Returns:
        numpy array shape (num_rays, 7), same layout as _dda_cast_fan
    """
    num_rays = dirs_x.shape[0]
    results = np.empty((num_rays, 7), dtype=np.float64)
    for i in range(num_rays):
        dist, side, cx, cy, value, steps, hit = _march_trace(
            cells, width, height, cell_w, cell_h, ox, oy, dirs_x[i], dirs_y[i],
            max_distance, step_count, edge_tolerance
        )
        results[i, 0] = dist
        results[i, 1] = side
        results[i, 2] = cx
        results[i, 3] = cy
        results[i, 4] = value
        results[i, 5] = steps
        results[i, 6] = 1.0 if hit else 0.0
    return results


class RayHit:
    """
    First wall crossed by one ray

    Attributes:
        distance: Euclidean distance from the origin to the crossed boundary
        perp_distance: distance * cos(angle between ray and view forward)
        side: HitSide of the crossed boundary
        cell_value: Code of the struck cell (0 for the implicit outer ring)
        hit_point: (x, y) world coordinates of the intersection
        cell: (cell_x, cell_y) of the struck cell
        direction: (dx, dy) unit direction of the ray
        steps: Grid crossings (DDA) or samples (march) taken
    """

    __slots__ = ('distance', 'perp_distance', 'side', 'cell_value',
                 'hit_point', 'cell', 'direction', 'steps')

    hit = True

    def __init__(self, distance, perp_distance, side, cell_value, hit_point,
                 cell, direction, steps):
        self.distance = distance
        self.perp_distance = perp_distance
        self.side = side
        self.cell_value = cell_value
        self.hit_point = hit_point
        self.cell = cell
        self.direction = direction
        self.steps = steps

    def __repr__(self):
        return (f"RayHit(dist={self.distance:.3f}, perp={self.perp_distance:.3f}, "
                f"side={self.side.name}, cell={self.cell}, value={self.cell_value})")


class RayMiss:
    """No wall within reach (fixed-step marching ran out of draw distance)"""

    __slots__ = ('origin', 'direction', 'max_distance', 'steps')

    hit = False

    def __init__(self, origin, direction, max_distance, steps):
        self.origin = origin
        self.direction = direction
        self.max_distance = max_distance
        self.steps = steps

    def __repr__(self):
        return f"RayMiss(origin={self.origin}, max_distance={self.max_distance:g})"


class Raycaster:
    """
    Ray intersection engine over a GridMap

    The strategy is chosen once at construction: 'dda' (exact, default)
    or 'march' (fixed-step reference implementation).
    """

    def __init__(self, strategy=STRATEGY_DDA, max_distance=MAX_DRAW_DISTANCE,
                 march_steps=MARCH_STEPS, edge_tolerance=1e-6):
        """
        Args:
            strategy: 'dda' or 'march'
            max_distance: Draw distance for marching (world units)
            march_steps: Number of samples for marching
            edge_tolerance: Tie tolerance for march hit-side detection
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown ray strategy {strategy!r}, expected one of {STRATEGIES}")
        if max_distance <= 0:
            raise ValueError(f"max_distance must be positive, got {max_distance}")
        if march_steps <= 0:
            raise ValueError(f"march_steps must be positive, got {march_steps}")

        self.strategy = strategy
        self.max_distance = float(max_distance)
        self.march_steps = int(march_steps)
        self.edge_tolerance = float(edge_tolerance)
        logger.debug("Raycaster using %s strategy", strategy)

    @staticmethod
    def max_steps_for(grid):
        """Upper bound on DDA crossings before leaving the grid"""
        return grid.width + grid.height + 2

    def cast_ray(self, grid, origin, direction, angle_from_forward=0.0):
        """
        Cast a single ray

        Args:
            grid: GridMap
            origin: (x, y) world position
            direction: (dx, dy), normalized here if needed
            angle_from_forward: Degrees between this ray and the view
                forward axis, for fish-eye correction

        Returns:
            RayHit, or RayMiss when nothing solid was reached
        """
        dx, dy = normalize(*direction)
        ox, oy = float(origin[0]), float(origin[1])

        if self.strategy == STRATEGY_DDA:
            result = _dda_trace(
                grid.cells, grid.width, grid.height, grid.cell_w, grid.cell_h,
                ox, oy, dx, dy, self.max_steps_for(grid)
            )
        else:
            result = _march_trace(
                grid.cells, grid.width, grid.height, grid.cell_w, grid.cell_h,
                ox, oy, dx, dy, self.max_distance, self.march_steps, self.edge_tolerance
            )

        dist, side, cx, cy, value, steps, hit = result
        return self._make_result(ox, oy, dx, dy, dist, side, cx, cy, value, steps, hit,
                                 math.cos(math.radians(angle_from_forward)))

    def cast_directions(self, grid, origin, dirs_x, dirs_y, angles_from_forward):
        """
        Cast a batch of rays from one origin

        Args:
            grid: GridMap
            origin: (x, y) world position
            dirs_x, dirs_y: 1D float arrays of unit directions
            angles_from_forward: 1D array of degrees off the view axis

        Returns:
            list of RayHit / RayMiss, in input order
        """
        dirs_x = np.ascontiguousarray(dirs_x, dtype=np.float64)
        dirs_y = np.ascontiguousarray(dirs_y, dtype=np.float64)
        ox, oy = float(origin[0]), float(origin[1])

        if self.strategy == STRATEGY_DDA:
            raw = _dda_cast_fan(
                grid.cells, grid.width, grid.height, grid.cell_w, grid.cell_h,
                ox, oy, dirs_x, dirs_y, self.max_steps_for(grid)
            )
        else:
            raw = _march_cast_fan(
                grid.cells, grid.width, grid.height, grid.cell_w, grid.cell_h,
                ox, oy, dirs_x, dirs_y, self.max_distance, self.march_steps, self.edge_tolerance
            )

        cos_table = np.cos(np.radians(np.asarray(angles_from_forward, dtype=np.float64)))
        results = []
        for i in range(raw.shape[0]):
            row = raw[i]
            results.append(self._make_result(
                ox, oy, float(dirs_x[i]), float(dirs_y[i]),
                float(row[COL_DIST]), int(row[COL_SIDE]),
                int(row[COL_CELL_X]), int(row[COL_CELL_Y]), int(row[COL_VALUE]),
                int(row[COL_STEPS]), row[COL_HIT] > 0.5, float(cos_table[i])
            ))
        return results

    def _make_result(self, ox, oy, dx, dy, dist, side, cx, cy, value, steps, hit, cos_offset):
        if not hit:
            logger.debug("No wall within %g units from (%.2f, %.2f) along (%.3f, %.3f)",
                         self.max_distance, ox, oy, dx, dy)
            return RayMiss((ox, oy), (dx, dy), self.max_distance, int(steps))

        dist = float(dist)
        return RayHit(
            distance=dist,
            perp_distance=dist * cos_offset,
            side=HitSide(int(side)),
            cell_value=int(value),
            hit_point=(ox + dx * dist, oy + dy * dist),
            cell=(int(cx), int(cy)),
            direction=(dx, dy),
            steps=int(steps),
        )
