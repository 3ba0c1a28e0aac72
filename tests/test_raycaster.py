"""Tests for the ray intersection engine."""

import math
import random

import numpy as np
import pytest

from level import GridMap, parse_level
from renderer3d.raycaster import HitSide, Raycaster, RayHit, RayMiss

CELL = 64.0
CENTER = (1.5 * CELL, 1.5 * CELL)


def room3():
    return parse_level("111\n101\n111", cell_size=CELL)


def bordered(width, height, cell=CELL, fill=None):
    cells = []
    for y in range(height):
        for x in range(width):
            if x in (0, width - 1) or y in (0, height - 1):
                cells.append(1)
            else:
                cells.append(fill(x, y) if fill else 0)
    return GridMap(width, height, cells, cell)


@pytest.fixture
def dda():
    return Raycaster()


def test_ray_along_positive_x_hits_x_boundary(dda):
    hit = dda.cast_ray(room3(), CENTER, (1.0, 0.0))

    assert isinstance(hit, RayHit)
    assert hit.hit
    assert hit.side is HitSide.X_BOUNDARY
    assert hit.cell_value == 1
    assert hit.cell == (2, 1)
    assert hit.distance == pytest.approx(0.5 * CELL)
    assert hit.perp_distance == pytest.approx(0.5 * CELL)
    assert hit.hit_point == pytest.approx((2 * CELL, 1.5 * CELL))
    assert hit.steps == 1


@pytest.mark.parametrize("direction, side, cell", [
    ((-1.0, 0.0), HitSide.X_BOUNDARY, (0, 1)),
    ((0.0, 1.0), HitSide.Y_BOUNDARY, (1, 2)),
    ((0.0, -1.0), HitSide.Y_BOUNDARY, (1, 0)),
])
def test_axis_aligned_rays(dda, direction, side, cell):
    hit = dda.cast_ray(room3(), CENTER, direction)
    assert hit.side is side
    assert hit.cell == cell
    assert hit.distance == pytest.approx(0.5 * CELL)


def test_diagonal_ray_matches_geometry(dda):
    d = (0.7071, 0.7071)
    hit = dda.cast_ray(room3(), CENTER, d)

    # Both boundaries x = 2*CELL and y = 2*CELL are 0.5*CELL away along each
    # axis, so the crossing lies at t = 0.5*CELL / cos(45 deg).
    expected = 0.5 * CELL / (0.7071 / math.hypot(*d))
    assert hit.distance == pytest.approx(expected)
    assert hit.distance == pytest.approx(0.5 * CELL * math.sqrt(2))
    assert hit.hit_point == pytest.approx((2 * CELL, 2 * CELL))
    assert hit.cell_value == 1
    assert hit.side in (HitSide.X_BOUNDARY, HitSide.Y_BOUNDARY)


def test_shallow_diagonal_matches_geometry(dda):
    hit = dda.cast_ray(room3(), CENTER, (0.6, 0.8))

    # y boundary (0.5*CELL / 0.8) comes before x boundary (0.5*CELL / 0.6)
    assert hit.side is HitSide.Y_BOUNDARY
    assert hit.distance == pytest.approx(0.5 * CELL / 0.8)
    assert hit.hit_point == pytest.approx((1.5 * CELL + 0.6 * hit.distance, 2 * CELL))


def test_direction_is_normalized(dda):
    a = dda.cast_ray(room3(), CENTER, (5.0, 0.0))
    b = dda.cast_ray(room3(), CENTER, (1.0, 0.0))
    assert a.distance == pytest.approx(b.distance)
    assert a.direction == pytest.approx((1.0, 0.0))


def test_zero_direction_is_rejected(dda):
    with pytest.raises(ValueError):
        dda.cast_ray(room3(), CENTER, (0.0, 0.0))


def test_far_wall_reports_material_and_distance(dda):
    grid = bordered(8, 3, fill=lambda x, y: 7 if x == 5 else 0)

    hit = dda.cast_ray(grid, CENTER, (1.0, 0.0))

    assert hit.cell == (5, 1)
    assert hit.cell_value == 7
    assert hit.distance == pytest.approx(5 * CELL - CENTER[0])
    assert hit.steps == 4


def test_fish_eye_correction_uses_cosine(dda):
    hit = dda.cast_ray(room3(), CENTER, (1.0, 0.0), angle_from_forward=60.0)
    assert hit.perp_distance == pytest.approx(hit.distance * 0.5)


def test_unbordered_grid_still_terminates(dda):
    grid = GridMap(4, 4, [0] * 16, cell_size=CELL)

    hit = dda.cast_ray(grid, (10.0, 10.0), (1.0, 0.0))

    assert hit.hit
    assert hit.cell == (4, 0)
    assert hit.cell_value == 0
    assert hit.distance == pytest.approx(4 * CELL - 10.0)


def test_origin_outside_grid_is_clamped_for_first_cell(dda):
    grid = GridMap(4, 1, [0, 0, 0, 1], cell_size=CELL)

    hit = dda.cast_ray(grid, (-20.0, 32.0), (1.0, 0.0))

    assert hit.hit
    assert hit.cell == (3, 0)
    assert hit.distance == pytest.approx(3 * CELL + 20.0)


def test_origin_outside_grid_hits_solid_clamped_cell(dda):
    grid = GridMap(4, 1, [1, 0, 0, 1], cell_size=CELL)

    hit = dda.cast_ray(grid, (-20.0, 32.0), (1.0, 0.0))

    assert hit.cell == (0, 0)
    assert hit.cell_value == 1
    assert hit.side is HitSide.X_BOUNDARY
    assert hit.distance == pytest.approx(20.0)
    assert hit.hit_point == pytest.approx((0.0, 32.0))
    assert hit.steps == 0


def test_origin_above_grid_enters_through_y_boundary(dda):
    grid = GridMap(1, 4, [2, 0, 0, 1], cell_size=CELL)

    hit = dda.cast_ray(grid, (32.0, -20.0), (0.0, 1.0))

    assert hit.cell == (0, 0)
    assert hit.cell_value == 2
    assert hit.side is HitSide.Y_BOUNDARY
    assert hit.distance == pytest.approx(20.0)


def test_origin_outside_grid_batch_matches_single_ray(dda):
    grid = GridMap(4, 1, [1, 0, 0, 1], cell_size=CELL)

    batch = dda.cast_directions(grid, (-20.0, 32.0), [1.0], [0.0], [0.0])

    assert batch[0].cell == (0, 0)
    assert batch[0].distance == pytest.approx(20.0)


@pytest.mark.parametrize("width, height", [(3, 3), (5, 4), (10, 10), (17, 6)])
def test_bordered_grids_always_hit_within_bound(dda, width, height):
    rng = random.Random(width * 100 + height)
    grid = bordered(width, height, fill=lambda x, y: 2 if rng.random() < 0.2 else 0)

    open_cells = [(x, y) for y in range(height) for x in range(width) if not grid.is_solid(x, y)]
    if not open_cells:
        open_cells = [(1, 1)]
        grid.paint(1, 1, 0)

    for _ in range(200):
        cx, cy = rng.choice(open_cells)
        origin = ((cx + rng.random()) * CELL, (cy + rng.random()) * CELL)
        angle = rng.uniform(0, 2 * math.pi)
        hit = dda.cast_ray(grid, origin, (math.cos(angle), math.sin(angle)))

        assert hit.hit
        assert hit.steps <= width + height
        assert grid.is_solid(*hit.cell)
        assert hit.distance >= 0.0


def test_hit_point_lies_on_the_reported_boundary(dda):
    rng = random.Random(7)
    grid = bordered(9, 7)
    for _ in range(100):
        origin = (rng.uniform(1.01, 7.99) * CELL, rng.uniform(1.01, 5.99) * CELL)
        angle = rng.uniform(0, 2 * math.pi)
        hit = dda.cast_ray(grid, origin, (math.cos(angle), math.sin(angle)))
        hx, hy = hit.hit_point
        coord = hx if hit.side is HitSide.X_BOUNDARY else hy
        assert coord / CELL == pytest.approx(round(coord / CELL), abs=1e-9)


def test_batch_cast_matches_single_rays(dda):
    grid = bordered(9, 7, fill=lambda x, y: 3 if (x, y) in ((4, 3), (6, 2)) else 0)
    origin = (2.3 * CELL, 3.6 * CELL)
    angles = np.linspace(-math.pi, math.pi, 37)
    dirs_x, dirs_y = np.cos(angles), np.sin(angles)

    batch = dda.cast_directions(grid, origin, dirs_x, dirs_y, np.zeros(len(angles)))

    for i, hit in enumerate(batch):
        single = dda.cast_ray(grid, origin, (dirs_x[i], dirs_y[i]))
        assert hit.distance == pytest.approx(single.distance)
        assert hit.side is single.side
        assert hit.cell == single.cell
        assert hit.cell_value == single.cell_value


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError, match="Unknown ray strategy"):
        Raycaster(strategy="bsp")


@pytest.mark.parametrize("kwargs", [{"max_distance": 0}, {"march_steps": 0}])
def test_bad_march_parameters_are_rejected(kwargs):
    with pytest.raises(ValueError):
        Raycaster(strategy="march", **kwargs)


class TestMarching:

    def test_hits_near_exact_distance(self):
        march = Raycaster(strategy="march", max_distance=2 * CELL, march_steps=512)
        step = 2 * CELL / 512

        hit = march.cast_ray(room3(), CENTER, (1.0, 0.0))

        assert hit.hit
        assert hit.side is HitSide.X_BOUNDARY
        assert hit.cell == (2, 1)
        assert hit.cell_value == 1
        assert hit.distance == pytest.approx(0.5 * CELL, abs=step)

    @pytest.mark.parametrize("direction", [(0.0, 1.0), (-1.0, 0.0), (0.6, 0.8), (-0.8, -0.6)])
    def test_agrees_with_dda(self, dda, direction):
        march = Raycaster(strategy="march", max_distance=4 * CELL, march_steps=2048)
        step = 4 * CELL / 2048
        grid = room3()

        expected = dda.cast_ray(grid, CENTER, direction)
        hit = march.cast_ray(grid, CENTER, direction)

        assert hit.side is expected.side
        assert hit.cell == expected.cell
        assert hit.distance == pytest.approx(expected.distance, abs=step)

    def test_reports_miss_when_draw_distance_is_too_short(self):
        grid = bordered(20, 3)
        march = Raycaster(strategy="march", max_distance=CELL, march_steps=64)

        result = march.cast_ray(grid, CENTER, (1.0, 0.0))

        assert isinstance(result, RayMiss)
        assert not result.hit
        assert result.max_distance == CELL
        assert result.steps == 64

    def test_leaving_the_grid_counts_as_hit(self):
        grid = GridMap(3, 1, [0, 0, 0], cell_size=CELL)
        march = Raycaster(strategy="march", max_distance=8 * CELL, march_steps=1024)

        hit = march.cast_ray(grid, (32.0, 32.0), (1.0, 0.0))

        assert hit.hit
        assert hit.cell == (3, 0)
        assert hit.cell_value == 0

    def test_batch_cast_mixes_hits_and_misses(self):
        grid = bordered(20, 3)
        march = Raycaster(strategy="march", max_distance=CELL, march_steps=64)

        results = march.cast_directions(grid, CENTER, [1.0, 0.0], [0.0, 1.0], [0.0, 0.0])

        assert not results[0].hit
        assert results[1].hit
        assert results[1].side is HitSide.Y_BOUNDARY
