"""Tests for the fan caster."""

import math

import numpy as np
import pytest

from level import GridMap
from renderer3d.raycaster import Raycaster, RayMiss
from renderer3d.scene import FanCaster, fan_offsets

CELL = 64.0


def corridor_facing_wall():
    """Open room with a flat wall at x = 5*CELL, far from the top/bottom borders"""
    width, height = 6, 41
    cells = []
    for y in range(height):
        for x in range(width):
            border = x in (0, width - 1) or y in (0, height - 1)
            cells.append(1 if border else 0)
    return GridMap(width, height, cells, CELL)


def test_fan_offsets_span_the_fov_inclusive():
    assert fan_offsets(60.0, 5) == pytest.approx([-30.0, -15.0, 0.0, 15.0, 30.0])
    assert fan_offsets(90.0, 1) == pytest.approx([0.0])


def test_first_ray_is_leftmost():
    caster = FanCaster(fov=60.0, num_rays=3)

    # Facing east on a y-down screen, left is north (negative y)
    dirs_x, dirs_y = caster.ray_directions((1.0, 0.0))

    assert dirs_y[0] < 0 < dirs_y[2]
    assert (dirs_x[1], dirs_y[1]) == pytest.approx((1.0, 0.0))
    assert math.degrees(math.atan2(dirs_y[0], dirs_x[0])) == pytest.approx(-30.0)


def test_ray_directions_are_unit_vectors():
    caster = FanCaster(fov=75.0, num_rays=17)
    dirs_x, dirs_y = caster.ray_directions((3.0, -4.0))
    assert np.hypot(dirs_x, dirs_y) == pytest.approx(np.ones(17))


def test_fish_eye_correction_flattens_a_perpendicular_wall():
    grid = corridor_facing_wall()
    caster = FanCaster(fov=60.0, num_rays=11)
    origin = (1.5 * CELL, 20.5 * CELL)
    wall_distance = 5 * CELL - origin[0]

    hits = caster.cast(grid, origin, (1.0, 0.0))

    assert len(hits) == 11
    for hit, offset in zip(hits, caster.offsets):
        assert hit.cell[0] == 5
        assert hit.perp_distance == pytest.approx(wall_distance)
        assert hit.distance == pytest.approx(wall_distance / math.cos(math.radians(offset)))

    euclid = [hit.distance for hit in hits]
    center = len(hits) // 2
    assert euclid[0] > euclid[1] > euclid[center]
    assert euclid[-1] > euclid[-2] > euclid[center]
    assert euclid[0] == pytest.approx(euclid[-1])


def test_results_are_ordered_left_to_right():
    grid = corridor_facing_wall()
    caster = FanCaster(fov=60.0, num_rays=7)

    hits = caster.cast(grid, (1.5 * CELL, 20.5 * CELL), (1.0, 0.0))

    ys = [hit.hit_point[1] for hit in hits]
    assert ys == sorted(ys)


def test_fan_with_marching_strategy_can_miss():
    grid = corridor_facing_wall()
    raycaster = Raycaster(strategy="march", max_distance=CELL, march_steps=32)
    caster = FanCaster(raycaster, fov=30.0, num_rays=5)

    hits = caster.cast(grid, (1.5 * CELL, 20.5 * CELL), (1.0, 0.0))

    assert all(isinstance(hit, RayMiss) for hit in hits)


@pytest.mark.parametrize("fov", [0, -10, 180, 270])
def test_invalid_fov_is_rejected(fov):
    with pytest.raises(ValueError):
        FanCaster(fov=fov, num_rays=10)


@pytest.mark.parametrize("num_rays", [0, -3])
def test_invalid_ray_count_is_rejected_at_construction(num_rays):
    with pytest.raises(ValueError, match="Ray count"):
        FanCaster(fov=60.0, num_rays=num_rays)


def test_set_fov_keeps_ray_count():
    caster = FanCaster(fov=60.0, num_rays=5)
    caster.set_fov(90.0)
    assert caster.offsets == pytest.approx([-45.0, -22.5, 0.0, 22.5, 45.0])


def test_set_resolution_rebuilds_offsets():
    caster = FanCaster(fov=60.0, num_rays=4)
    caster.set_resolution(9)
    assert caster.num_rays == 9
    assert len(caster.offsets) == 9
    with pytest.raises(ValueError):
        caster.set_resolution(0)
