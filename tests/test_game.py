from __future__ import annotations

import numpy as np
import pytest

from tile2048.game import (
    INITIAL_GRID,
    Direction,
    apply_move,
    compress,
    has_value,
    merge,
    new_grid,
    validate_grid,
)


def _row_grid(row: list[int]) -> np.ndarray:
    grid = new_grid()
    grid[0] = row
    return grid


def _column_grid(column: list[int]) -> np.ndarray:
    grid = new_grid()
    grid[:, 0] = column
    return grid


@pytest.mark.parametrize(
    "row, direction, expected",
    [
        ([2, 2, 0, 0], Direction.LEFT, [4, 0, 0, 0]),
        ([2, 2, 2, 2], Direction.LEFT, [4, 4, 0, 0]),
        ([4, 2, 2, 0], Direction.LEFT, [4, 4, 0, 0]),
        ([2, 0, 2, 4], Direction.LEFT, [4, 4, 0, 0]),
        ([2, 2, 4, 4], Direction.LEFT, [4, 8, 0, 0]),
        ([2, 2, 4, 4], Direction.RIGHT, [0, 0, 4, 8]),
        ([2, 2, 2, 0], Direction.RIGHT, [0, 0, 2, 4]),
        ([0, 4, 0, 2], Direction.RIGHT, [0, 0, 4, 2]),
        ([8, 4, 4, 8], Direction.LEFT, [8, 8, 8, 0]),
    ],
)
def test_row_moves(row: list[int], direction: Direction, expected: list[int]) -> None:
    grid = _row_grid(row)
    assert apply_move(grid, direction)
    assert grid[0].tolist() == expected
    assert not grid[1:].any()


@pytest.mark.parametrize(
    "column, direction, expected",
    [
        ([2, 2, 2, 2], Direction.UP, [4, 4, 0, 0]),
        ([2, 2, 2, 2], Direction.DOWN, [0, 0, 4, 4]),
        ([0, 2, 0, 2], Direction.UP, [4, 0, 0, 0]),
        ([4, 0, 4, 8], Direction.DOWN, [0, 0, 8, 8]),
    ],
)
def test_column_moves(column: list[int], direction: Direction, expected: list[int]) -> None:
    grid = _column_grid(column)
    assert apply_move(grid, direction)
    assert grid[:, 0].tolist() == expected


def test_compress_does_not_merge() -> None:
    grid = _row_grid([0, 2, 0, 2])
    compress(grid, Direction.LEFT)
    assert grid[0].tolist() == [2, 2, 0, 0]


def test_merge_leaves_gaps_for_second_compress() -> None:
    grid = _row_grid([2, 2, 2, 2])
    merge(grid, Direction.LEFT)
    assert grid[0].tolist() == [4, 0, 4, 0]


def test_initial_layout_left() -> None:
    grid = validate_grid(INITIAL_GRID)
    assert apply_move(grid, Direction.LEFT)
    assert grid.tolist() == [
        [4, 16, 0, 0],
        [32, 128, 16, 0],
        [2048, 0, 0, 0],
        [0, 0, 0, 0],
    ]


def test_settled_grid_is_a_noop() -> None:
    grid = validate_grid(
        [
            [2, 4, 8, 16],
            [4, 0, 0, 0],
            [16, 2, 0, 0],
            [0, 0, 0, 0],
        ]
    )
    before = grid.copy()
    assert not apply_move(grid, Direction.LEFT)
    assert np.array_equal(grid, before)


def test_settled_lines_do_not_change(random_grids: list[np.ndarray]) -> None:
    checked = 0
    for grid in random_grids:
        moved = grid.copy()
        apply_move(moved, Direction.LEFT)
        rows = moved.tolist()
        # a second move may still merge tiles that met during the first
        if any(row[j] != 0 and row[j] == row[j + 1] for row in rows for j in range(3)):
            continue
        settled = moved.copy()
        assert not apply_move(moved, Direction.LEFT)
        assert np.array_equal(moved, settled)
        checked += 1
    assert checked > 0


def test_sum_is_conserved(random_grids: list[np.ndarray]) -> None:
    for grid in random_grids:
        for direction in Direction:
            moved = grid.copy()
            apply_move(moved, direction)
            assert moved.sum() == grid.sum()


def test_horizontal_symmetry(random_grids: list[np.ndarray]) -> None:
    for grid in random_grids:
        left = grid.copy()
        apply_move(left, Direction.LEFT)
        right = np.fliplr(grid).copy()
        apply_move(right, Direction.RIGHT)
        assert np.array_equal(np.fliplr(right), left)


def test_vertical_symmetry(random_grids: list[np.ndarray]) -> None:
    for grid in random_grids:
        up = grid.copy()
        apply_move(up, Direction.UP)
        down = np.flipud(grid).copy()
        apply_move(down, Direction.DOWN)
        assert np.array_equal(np.flipud(down), up)


def test_cells_stay_powers_of_two(random_grids: list[np.ndarray]) -> None:
    for grid in random_grids:
        for direction in Direction:
            moved = grid.copy()
            apply_move(moved, direction)
            validate_grid(moved)


def test_has_value() -> None:
    grid = validate_grid(INITIAL_GRID)
    assert has_value(grid, 0)
    assert has_value(grid, 1024)
    assert not has_value(grid, 2048)
    assert not has_value(validate_grid([[2] * 4] * 4), 0)


@pytest.mark.parametrize(
    "cells",
    [
        [[0] * 4] * 3,
        [[0] * 3] * 4,
        [[0, 0, 0, -2]] + [[0] * 4] * 3,
        [[0, 0, 0, 3]] + [[0] * 4] * 3,
        [[0, 0, 0, 6]] + [[0] * 4] * 3,
        [[0, 0, 1, 2]] + [[0] * 4] * 3,
    ],
)
def test_validate_grid_rejects(cells: list[list[int]]) -> None:
    with pytest.raises(ValueError):
        validate_grid(cells)


def test_validate_grid_copies() -> None:
    cells = [list(row) for row in INITIAL_GRID]
    grid = validate_grid(cells)
    grid[0, 0] = 0
    assert cells[0][0] == 2


def test_direction_parse() -> None:
    assert Direction.parse("Left") is Direction.LEFT
    assert Direction.parse(" down ") is Direction.DOWN
    with pytest.raises(ValueError, match="Invalid direction"):
        Direction.parse("north")


def test_validate_grid_rejects_a_one_tile() -> None:
    with pytest.raises(ValueError, match="at least 2"):
        validate_grid([[1, 0, 0, 0]] + [[0] * 4] * 3)
