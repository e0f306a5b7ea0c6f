# tests/conftest.py
import cv2
import numpy as np
import pytest

from sudoku_vision.grid import EMPTY
from sudoku_vision.ocr import DigitRecognizer, RecognitionResult


EASY_PUZZLE = [
    [5, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]

EASY_SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


class BoardRecognizer(DigitRecognizer):
    """
    Plays back a known board.

    Calls are assumed to arrive cell by cell in row-major order with
    ``samples`` calls per cell. ``noise`` maps (row, col, pass) to the text
    returned for that one call instead of the true value.
    """

    def __init__(self, board, samples=3, noise=None):
        self.board = np.asarray(board)
        self.samples = samples
        self.noise = noise or {}
        self.calls = 0
        self.entered = 0
        self.exited = 0
        self.shapes = []

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited += 1
        return False

    def recognize(self, image):
        self.shapes.append(image.shape)
        cell, sample = divmod(self.calls, self.samples)
        self.calls += 1
        r, c = divmod(cell, 9)
        if (r, c, sample) in self.noise:
            return RecognitionResult(self.noise[(r, c, sample)], 50.0)
        value = int(self.board[r, c])
        return RecognitionResult(str(value) if value != EMPTY else "", 95.0)


class ScriptedRecognizer(DigitRecognizer):
    """Returns the given texts in order, one per call."""

    def __init__(self, texts):
        self.texts = list(texts)
        self.images = []

    def recognize(self, image):
        self.images.append(image.copy())
        return RecognitionResult(self.texts[len(self.images) - 1])


def draw_puzzle(board, size=450):
    """Render a board as a clean RGB puzzle image."""
    image = np.full((size, size, 3), 255, dtype=np.uint8)
    cell = size // 9
    for i in range(10):
        thickness = 3 if i % 3 == 0 else 1
        pos = min(i * cell, size - 1)
        cv2.line(image, (0, pos), (size - 1, pos), (0, 0, 0), thickness)
        cv2.line(image, (pos, 0), (pos, size - 1), (0, 0, 0), thickness)
    font = cv2.FONT_HERSHEY_SIMPLEX
    for r in range(9):
        for c in range(9):
            val = int(board[r][c])
            if val == EMPTY:
                continue
            size_text, _ = cv2.getTextSize(str(val), font, 1.0, 2)
            x = c * cell + (cell - size_text[0]) // 2
            y = r * cell + (cell + size_text[1]) // 2
            cv2.putText(image, str(val), (x, y), font, 1.0, (0, 0, 0), 2, cv2.LINE_AA)
    return image


@pytest.fixture
def easy_puzzle():
    return np.array(EASY_PUZZLE)


@pytest.fixture
def easy_solution():
    return np.array(EASY_SOLUTION)


@pytest.fixture
def puzzle_image():
    return draw_puzzle(EASY_PUZZLE)
