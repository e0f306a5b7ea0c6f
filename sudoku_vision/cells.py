"""
Cell extraction: slice a puzzle image into its 81 cells.

The photo is assumed to be cropped to the puzzle, so the grid is divided
evenly. Each cell is trimmed by a uniform inset so grid-line ink stays out of
the crop handed to the recognizer.
"""

from typing import Dict, Iterator, Tuple

import numpy as np

from .grid import SIZE


PADDING_RATIO = 0.1
MIN_CELL_SIZE = 8


def cell_geometry(width: int, height: int) -> Tuple[int, int, int]:
    """
    Returns:
        (cell_width, cell_height, padding) for an image of the given size
    """
    cell_w = width // SIZE
    cell_h = height // SIZE
    padding = int(min(cell_w, cell_h) * PADDING_RATIO)
    return cell_w, cell_h, padding


def check_image_size(width: int, height: int) -> Tuple[bool, str]:
    """
    Check whether an image is large enough to be split into padded cells.

    Returns:
        tuple: (is_usable, reason)
    """
    cell_w, cell_h, padding = cell_geometry(width, height)
    inner = min(cell_w, cell_h) - 2 * padding
    if inner < MIN_CELL_SIZE:
        return False, (f"Image {width}x{height} is too small: cells would be {inner}px "
                       f"after padding (need at least {MIN_CELL_SIZE}px)")
    return True, ""


def extract_cells(image: np.ndarray) -> Dict[Tuple[int, int], np.ndarray]:
    """
    Cut the image into 81 padded cell crops.

    Args:
        image: Puzzle image, (H, W) or (H, W, channels)

    Returns:
        Dictionary mapping (row, col) -> cell crop (a copy, not a view)
    """
    h, w = image.shape[:2]
    ok, reason = check_image_size(w, h)
    if not ok:
        raise ValueError(reason)

    cell_w, cell_h, padding = cell_geometry(w, h)
    inner_w = cell_w - 2 * padding
    inner_h = cell_h - 2 * padding

    cells = {}
    for r in range(SIZE):
        for c in range(SIZE):
            y1 = r * cell_h + padding
            x1 = c * cell_w + padding
            cells[(r, c)] = image[y1:y1 + inner_h, x1:x1 + inner_w].copy()
    return cells


def iter_cells(cells: Dict[Tuple[int, int], np.ndarray]) -> Iterator[Tuple[int, int, np.ndarray]]:
    """Yield (row, col, crop) in row-major order."""
    for r in range(SIZE):
        for c in range(SIZE):
            yield r, c, cells[(r, c)]
