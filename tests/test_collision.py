"""Tests for collision resolution with axis sliding."""

import pytest

from game.collision import CollisionResolver, MoveOutcome
from level import GridMap, parse_level

CELL = 64.0


def make_grid(text):
    return parse_level(text, cell_size=CELL)


def test_free_move_is_accepted_whole():
    grid = make_grid("1111\n1001\n1001\n1111")
    resolver = CollisionResolver()

    assert resolver.resolve(grid, (80.0, 80.0), (30.0, 20.0)) == (110.0, 100.0)
    assert resolver.last_outcome is MoveOutcome.FREE


def test_diagonal_into_corner_is_blocked():
    grid = make_grid("111\n101\n111")
    resolver = CollisionResolver()

    new_pos = resolver.resolve(grid, (96.0, 96.0), (50.0, 50.0))

    assert new_pos == (96.0, 96.0)
    assert resolver.last_outcome is MoveOutcome.BLOCKED


def test_slides_along_x_when_only_x_is_open():
    # Corridor running east, walls above and below
    grid = make_grid("1111\n1001\n1111")
    resolver = CollisionResolver()

    new_pos = resolver.resolve(grid, (96.0, 96.0), (40.0, 40.0))

    assert new_pos == (136.0, 96.0)
    assert resolver.last_outcome is MoveOutcome.SLIDE_X


def test_slides_along_y_when_only_y_is_open():
    # Corridor running south, walls left and right
    grid = make_grid("111\n101\n101\n111")
    resolver = CollisionResolver()

    new_pos = resolver.resolve(grid, (96.0, 96.0), (40.0, 40.0))

    assert new_pos == (96.0, 136.0)
    assert resolver.last_outcome is MoveOutcome.SLIDE_Y


def test_x_slide_takes_priority_over_y_slide():
    grid = make_grid("1111\n1001\n1011\n1111")
    resolver = CollisionResolver()

    # Diagonal target (2,2) is solid, both axis alternates are open
    new_pos = resolver.resolve(grid, (96.0, 96.0), (40.0, 40.0))

    assert new_pos == (136.0, 96.0)
    assert resolver.last_outcome is MoveOutcome.SLIDE_X


def test_straight_into_wall_keeps_position():
    grid = make_grid("111\n101\n111")
    resolver = CollisionResolver()

    new_pos = resolver.resolve(grid, (96.0, 96.0), (50.0, 0.0))

    assert new_pos == (96.0, 96.0)
    assert resolver.last_outcome is MoveOutcome.BLOCKED


def test_cannot_leave_an_unbordered_grid():
    grid = GridMap(2, 2, [0, 0, 0, 0], cell_size=CELL)
    resolver = CollisionResolver()

    new_pos = resolver.resolve(grid, (10.0, 10.0), (-20.0, -20.0))

    assert new_pos == (10.0, 10.0)
    assert resolver.last_outcome is MoveOutcome.BLOCKED


def test_zero_displacement():
    grid = make_grid("111\n101\n111")
    resolver = CollisionResolver()
    assert resolver.resolve(grid, (96.0, 96.0), (0.0, 0.0)) == (96.0, 96.0)


@pytest.mark.parametrize("position, expected", [((96.0, 96.0), True), ((10.0, 10.0), False)])
def test_can_stand_at(position, expected):
    grid = make_grid("111\n101\n111")
    assert CollisionResolver().can_stand_at(grid, position) is expected
