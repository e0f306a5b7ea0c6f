"""
Simple backtracking Sudoku solver with basic safety checks.
"""

from typing import List, Optional

import numpy as np

from .grid import EMPTY, SIZE, DIGITS, Grid, as_board, box_values, find_conflicts


def _board_of(grid) -> np.ndarray:
    if isinstance(grid, Grid):
        return grid.cells
    if isinstance(grid, np.ndarray) and grid.shape == (SIZE, SIZE):
        return grid
    raise TypeError("solve() needs a Grid or a 9x9 numpy board to work on in place")


def _find_empty(board: np.ndarray):
    positions = np.argwhere(board == EMPTY)
    if positions.size == 0:
        return None
    return tuple(positions[0])


def is_valid(board: np.ndarray, row: int, col: int, val: int) -> bool:
    """True if ``val`` is not yet used in the row, column or box of (row, col)."""
    if val in board[row, :]:
        return False
    if val in board[:, col]:
        return False
    if val in box_values(board, row, col):
        return False
    return True


def validate_givens(board: np.ndarray) -> tuple[bool, str]:
    """Check for duplicate givens; fails fast to avoid hopeless searches."""
    conflicts = find_conflicts(board)
    if conflicts:
        return False, conflicts[0]
    return True, ""


def _search(board: np.ndarray, step_counter: List[int]) -> bool:
    empty = _find_empty(board)
    if empty is None:
        return True

    r, c = empty
    for val in DIGITS:
        if is_valid(board, r, c, val):
            board[r, c] = val
            step_counter[0] += 1
            if _search(board, step_counter):
                return True
            board[r, c] = EMPTY

    return False


def solve(grid, step_counter: Optional[List[int]] = None) -> bool:
    """
    In-place backtracking solver. Returns True if solved.

    Takes a Grid or a 9x9 numpy board and raises TypeError for anything
    else, since a converted copy would hide the result from the caller.
    Nested lists go through solve_puzzle, which converts with as_board.

    On False the board holds exactly what it held before the call: every
    tentative placement is cleared on the way back out, and boards whose
    givens already clash are rejected before any placement is made.
    """
    board = _board_of(grid)
    if step_counter is None:
        step_counter = [0]

    ok, _ = validate_givens(board)
    if not ok:
        return False
    return _search(board, step_counter)


def solve_puzzle(board) -> tuple[np.ndarray | None, str]:
    """
    Return a solved copy of the board, or (None, reason) if unsolvable or invalid.
    """
    working = as_board(board)
    is_valid_board, reason = validate_givens(working)
    if not is_valid_board:
        return None, reason

    steps = [0]
    if solve(working, steps):
        return working, f"Solved in {steps[0]} steps"
    return None, "No solution found"
