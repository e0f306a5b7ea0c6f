#!/usr/bin/env python3
"""
Convenience script to process Sudoku images.

This script provides a simple interface to the Sudoku Solver pipeline.

Usage:
    python process_image.py --image 01.jpg
    python process_image.py --image path/to/sudoku.jpg --output my_output/
"""

from sudoku_vision.sudoku_solver import main

if __name__ == '__main__':
    main()
