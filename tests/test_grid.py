# tests/test_grid.py
import numpy as np
import pytest

from sudoku_vision.grid import Grid, as_board, box_origin, format_board


def test_box_partition_tiles_the_grid():
    seen = {}
    for r in range(9):
        for c in range(9):
            seen.setdefault(box_origin(r, c), []).append((r, c))
    assert len(seen) == 9
    assert all(len(cells) == 9 for cells in seen.values())


def test_as_board_rejects_bad_shapes_and_values():
    with pytest.raises(ValueError):
        as_board([[0] * 9] * 8)
    with pytest.raises(ValueError):
        as_board([[0] * 9] * 8 + [[0] * 8])
    with pytest.raises(ValueError):
        as_board([[10] + [0] * 8] + [[0] * 9] * 8)
    with pytest.raises(ValueError):
        as_board([[-1] + [0] * 8] + [[0] * 9] * 8)


def test_grid_round_trips_presentation_rows(easy_puzzle):
    rows = [[v or None for v in row] for row in easy_puzzle.tolist()]
    grid = Grid.from_rows(rows, easy_puzzle != 0)
    assert grid.to_rows() == rows
    assert grid.original_rows()[0][:3] == [True, True, False]


def test_set_cell_updates_value_and_mask():
    grid = Grid.empty()
    grid.set_cell(4, 7, 3)
    assert grid.get_cell(4, 7) == 3
    assert grid.original[4, 7]

    grid.set_cell(4, 7, None)
    assert grid.get_cell(4, 7) is None
    assert not grid.original[4, 7]


@pytest.mark.parametrize("value", [0, 10, -3, True, "5"])
def test_set_cell_rejects_values_outside_one_to_nine(value):
    grid = Grid.empty()
    with pytest.raises(ValueError):
        grid.set_cell(0, 0, value)


@pytest.mark.parametrize("row,col", [(-1, 0), (9, 0), (0, 9)])
def test_set_cell_rejects_positions_off_the_board(row, col):
    with pytest.raises(ValueError):
        Grid.empty().set_cell(row, col, 1)


def test_copy_is_independent(easy_puzzle):
    grid = Grid(easy_puzzle, easy_puzzle != 0)
    clone = grid.copy()
    clone.set_cell(0, 2, 4)
    assert grid.get_cell(0, 2) is None
    assert grid != clone


def test_clear_resets_cells_and_mask(easy_puzzle):
    grid = Grid(easy_puzzle, easy_puzzle != 0)
    grid.clear()
    assert grid == Grid.empty()
    assert not grid.is_complete()


def test_format_board_marks_boxes(easy_puzzle):
    text = format_board(easy_puzzle)
    lines = text.splitlines()
    assert len(lines) == 11
    assert lines[0] == "5 3 . | . 7 . | . . ."
    assert set(lines[3]) == {"-"}
