"""
Board representation shared by the recognition pipeline and the solver.

A board is a 9x9 integer numpy array where 0 marks an empty cell and 1-9 are
digits. ``Grid`` wraps a board together with the mask of cells that were
populated by recognition (or typed in by the user) so a front end can tell
givens from solved cells.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np


EMPTY = 0
SIZE = 9
BOX = 3
DIGITS = tuple(range(1, SIZE + 1))


def new_board() -> np.ndarray:
    """Allocate an all-empty 9x9 board."""
    return np.zeros((SIZE, SIZE), dtype=int)


def as_board(rows: Iterable[Sequence[Optional[int]]]) -> np.ndarray:
    """
    Convert a nested 9x9 sequence into a board.

    ``None`` and ``0`` both mean empty. Anything that is not a 9x9 grid of
    values in {None, 0..9} raises ValueError.
    """
    if isinstance(rows, np.ndarray):
        data = rows.tolist()
    else:
        data = [list(r) for r in rows]

    if len(data) != SIZE or any(len(r) != SIZE for r in data):
        raise ValueError("Board must be 9x9")

    board = new_board()
    for r, row in enumerate(data):
        for c, val in enumerate(row):
            if val is None:
                continue
            if isinstance(val, bool) or int(val) != val or not 0 <= int(val) <= SIZE:
                raise ValueError(f"Invalid value {val!r} at ({r+1},{c+1})")
            board[r, c] = int(val)
    return board


def box_origin(row: int, col: int) -> Tuple[int, int]:
    """Top-left corner of the 3x3 box containing (row, col)."""
    return (row // BOX) * BOX, (col // BOX) * BOX


def box_values(board: np.ndarray, row: int, col: int) -> np.ndarray:
    r0, c0 = box_origin(row, col)
    return board[r0:r0 + BOX, c0:c0 + BOX].ravel()


def find_conflicts(board: np.ndarray) -> List[str]:
    """List every row, column and box that holds the same digit twice."""
    notes: List[str] = []

    def check(values, label: str):
        seen = set()
        for v in values:
            v = int(v)
            if v == EMPTY:
                continue
            if v in seen:
                notes.append(f"{label} has duplicate digit {v}")
                return
            seen.add(v)

    for i in range(SIZE):
        check(board[i, :], f"Row {i+1}")
    for i in range(SIZE):
        check(board[:, i], f"Column {i+1}")
    for br in range(BOX):
        for bc in range(BOX):
            check(box_values(board, br * BOX, bc * BOX), f"Box ({br+1},{bc+1})")

    return notes


def format_board(board: np.ndarray) -> str:
    """Render the 9x9 board as a human-friendly string."""
    lines = []
    for r, row in enumerate(board):
        parts = []
        for c, val in enumerate(row):
            parts.append(str(val) if val != EMPTY else ".")
            if c in {2, 5}:
                parts.append("|")
        line = " ".join(parts)
        lines.append(line)
        if r in {2, 5}:
            lines.append("-" * len(line))
    return "\n".join(lines)


class Grid:
    """
    A puzzle state plus its OriginalMask.

    ``cells`` is the board the solver works on; ``original`` flags the cells
    that were given (recognized or typed in) rather than deduced or solved.
    The mask is presentation data only.
    """

    def __init__(self, cells: Optional[np.ndarray] = None, original: Optional[np.ndarray] = None):
        self.cells = new_board() if cells is None else as_board(cells)
        if original is None:
            self.original = np.zeros((SIZE, SIZE), dtype=bool)
        else:
            mask = np.asarray(original, dtype=bool)
            if mask.shape != (SIZE, SIZE):
                raise ValueError("Original mask must be 9x9")
            self.original = mask.copy()

    @classmethod
    def empty(cls) -> "Grid":
        return cls()

    @classmethod
    def from_rows(cls, rows, original=None) -> "Grid":
        return cls(as_board(rows), original)

    def to_rows(self) -> List[List[Optional[int]]]:
        return [[int(v) if v != EMPTY else None for v in row] for row in self.cells]

    def original_rows(self) -> List[List[bool]]:
        return [[bool(v) for v in row] for row in self.original]

    def get_cell(self, row: int, col: int) -> Optional[int]:
        self._check_position(row, col)
        val = int(self.cells[row, col])
        return val if val != EMPTY else None

    def set_cell(self, row: int, col: int, value: Optional[int]):
        """Manual correction of one cell; a typed digit counts as a given."""
        self._check_position(row, col)
        if value is not None and (isinstance(value, bool) or value not in DIGITS):
            raise ValueError(f"Cell value must be 1-9 or None, got {value!r}")
        self.cells[row, col] = EMPTY if value is None else value
        self.original[row, col] = value is not None

    def clear(self):
        self.cells[:, :] = EMPTY
        self.original[:, :] = False

    def copy(self) -> "Grid":
        return Grid(self.cells.copy(), self.original.copy())

    def is_complete(self) -> bool:
        return not np.any(self.cells == EMPTY)

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self.cells, other.cells) and np.array_equal(self.original, other.original)

    def __str__(self):
        return format_board(self.cells)

    @staticmethod
    def _check_position(row: int, col: int):
        if not (0 <= row < SIZE and 0 <= col < SIZE):
            raise ValueError(f"Cell position out of range: ({row}, {col})")
