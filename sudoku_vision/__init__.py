"""
Sudoku Vision - read a photographed Sudoku and solve it

This package contains modules for:
- Cell extraction and per-cell image normalization
- Digit recognition with Tesseract, sampled several times per cell
- Majority voting and constraint-based refinement of the read grid
- Sudoku puzzle solving
"""

__version__ = "1.0.0"

from .grid import EMPTY, Grid, format_board
from .solver import solve, solve_puzzle
