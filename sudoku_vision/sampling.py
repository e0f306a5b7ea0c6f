"""
Repeated-sampling digit reading.

Every cell is normalized several times with different threshold settings and
each view is sent to the recognizer. The views disagree on hard cells (faint
ink, grid-line remnants, noise); the value seen most often wins. An empty
reading is a vote like any other, so a cell is only reported as a digit when
the recognizer sees that digit more consistently than it sees nothing.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .cells import iter_cells
from .grid import EMPTY, new_board
from .ocr import DigitRecognizer, parse_digit
from .preprocessing import DEFAULT_BIAS, DEFAULT_BLOCK_DIVISOR, normalize_cell


DEFAULT_SAMPLES = 3

BLOCK_DIVISOR_STEP = 4
BIAS_STEP = 1.5
MIN_BLOCK_DIVISOR = 4
MIN_BIAS = 0.5


@dataclass(frozen=True)
class ThresholdPreset:
    block_divisor: int
    bias: float


def build_presets(n: int = DEFAULT_SAMPLES) -> List[ThresholdPreset]:
    """
    Build n distinct threshold presets.

    The first preset is the reference setting. After that, presets alternate
    between larger windows with a stronger bias (drops speckle and shading)
    and smaller windows with a weaker bias (keeps faint, thin strokes), moving
    further from the reference each round. The window size is the cell's
    shorter side divided by ``block_divisor``.
    """
    if n < 1:
        raise ValueError(f"Need at least one sample per cell, got {n}")

    presets = []
    for i in range(n):
        step = (i + 1) // 2
        direction = 1 if i % 2 else -1
        divisor = DEFAULT_BLOCK_DIVISOR - direction * BLOCK_DIVISOR_STEP * step
        bias = DEFAULT_BIAS + direction * BIAS_STEP * step
        presets.append(ThresholdPreset(max(MIN_BLOCK_DIVISOR, divisor),
                                       round(max(MIN_BIAS, bias), 2)))
    return presets


def collect_samples(cell: np.ndarray, recognizer: DigitRecognizer,
                    presets: Sequence[ThresholdPreset]) -> List[int]:
    """Recognize one cell once per preset. Returns the votes in preset order."""
    votes = []
    for preset in presets:
        view = normalize_cell(cell, preset.block_divisor, preset.bias)
        result = recognizer.recognize(view)
        votes.append(parse_digit(result.text))
    return votes


def majority_vote(samples: Sequence[int]) -> Tuple[int, int]:
    """
    Pick the most frequent value.

    Ties go to the value that was seen first.

    Returns:
        (value, count)
    """
    counts: Dict[int, int] = {}
    for value in samples:
        counts[value] = counts.get(value, 0) + 1

    best_value, best_count = EMPTY, 0
    # dicts keep first-seen order, and only a strictly larger count replaces the leader
    for value, count in counts.items():
        if count > best_count:
            best_value, best_count = value, count
    return best_value, best_count


def read_grid_digits(cells: Dict[Tuple[int, int], np.ndarray],
                     recognizer: DigitRecognizer,
                     samples: int = DEFAULT_SAMPLES,
                     presets: Optional[Sequence[ThresholdPreset]] = None,
                     verbose: bool = False
                     ) -> Tuple[np.ndarray, np.ndarray, Dict[Tuple[int, int], List[int]]]:
    """
    Read all 81 cells by majority vote over repeated samples.

    Args:
        cells: (row, col) -> cell crop, as returned by extract_cells
        recognizer: An active recognizer
        samples: Number of passes per cell (ignored when presets is given)
        presets: Explicit threshold presets, one pass each
        verbose: Print one line per row while reading

    Returns:
        board (9x9 ints), scores (9x9 floats, share of votes for the winner),
        votes ((row, col) -> list of per-pass values)
    """
    if presets is None:
        presets = build_presets(samples)
    presets = list(presets)
    if not presets:
        raise ValueError("Need at least one threshold preset")

    board = new_board()
    scores = np.zeros(board.shape, dtype=float)
    votes: Dict[Tuple[int, int], List[int]] = {}

    for r, c, cell in iter_cells(cells):
        sample_set = collect_samples(cell, recognizer, presets)
        value, count = majority_vote(sample_set)
        board[r, c] = value
        scores[r, c] = count / len(presets)
        votes[(r, c)] = sample_set
        if verbose and c == 8:
            row_text = " ".join(str(v) if v != EMPTY else "." for v in board[r])
            print(f"      Row {r+1}: {row_text}")

    return board, scores, votes
