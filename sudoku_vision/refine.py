"""
Fill in cells that the recognized digits already force.

A single pass: an empty cell whose row, column and box leave only one
possible digit gets that digit. Candidates are always taken from the board as
it was handed in, so fills made during the pass never constrain each other
and the result does not depend on scan order. Cells that only become forced
once other cells are filled are left for the solver.
"""

from typing import List, Tuple

import numpy as np

from .grid import EMPTY, SIZE, DIGITS, box_values


def candidates(board: np.ndarray, row: int, col: int) -> List[int]:
    """Digits not yet used in the row, column or box of (row, col)."""
    used = set(int(v) for v in board[row, :])
    used.update(int(v) for v in board[:, col])
    used.update(int(v) for v in box_values(board, row, col))
    return [d for d in DIGITS if d not in used]


def refine_grid(board: np.ndarray) -> Tuple[np.ndarray, List[str]]:
    """
    Deduce single-candidate cells in one pass.

    Every cell is checked against the input board, not against the partly
    refined copy. Only empty cells are ever written. The input board is left
    untouched.

    Returns:
        refined_board, list of notes about filled cells
    """
    refined = board.copy()
    notes: List[str] = []

    for r in range(SIZE):
        for c in range(SIZE):
            if board[r, c] != EMPTY:
                continue
            options = candidates(board, r, c)
            if len(options) == 1:
                refined[r, c] = options[0]
                notes.append(f"Filled ({r+1},{c+1}) with {options[0]} (only candidate)")

    return refined, notes
