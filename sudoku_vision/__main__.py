"""
Entry point for running the sudoku_vision package.

Usage:
    python -m sudoku_vision --image path/to/image.jpg
"""

from .sudoku_solver import main

if __name__ == '__main__':
    main()
