"""
Digit recognition for single cell crops.

The recognizer is an external OCR engine (Tesseract, through pytesseract)
restricted to the characters 1-9 and run in single-character mode. The rest of
the package only depends on ``DigitRecognizer.recognize`` returning some text;
anything that is not exactly one digit 1-9 is read as an empty cell.
"""

import re
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pytesseract

from .grid import EMPTY


DIGIT_WHITELIST = "123456789"

# --psm 10: single character, --oem 1: LSTM engine only.
# The TSV output stays on: image_to_data reads its result from that file.
TESSERACT_CONFIG = " ".join([
    "--oem 1",
    "--psm 10",
    f"-c tessedit_char_whitelist={DIGIT_WHITELIST}",
    "-c tessedit_create_pdf=0",
    "-c tessedit_create_hocr=0",
    "-c tessedit_create_boxfile=0",
    "-c tessedit_create_unlv=0",
])

_DIGIT_RE = re.compile(r"^[1-9]$")


@dataclass
class RecognitionResult:
    text: str
    confidence: float = -1.0

    @property
    def digit(self) -> int:
        return parse_digit(self.text)


def parse_digit(text: Optional[str]) -> int:
    """Map recognizer output to a cell value: one digit 1-9, otherwise EMPTY."""
    if not text:
        return EMPTY
    text = text.strip()
    if _DIGIT_RE.match(text):
        return int(text)
    return EMPTY


class DigitRecognizer:
    """
    Base class for recognizers.

    Recognizers are used as context managers so engines that hold a process
    or model can be set up once per recognition run and released afterwards.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def recognize(self, image: np.ndarray) -> RecognitionResult:
        raise NotImplementedError


class TesseractRecognizer(DigitRecognizer):
    """
    Tesseract digit reader.

    Usage:
        with TesseractRecognizer() as recognizer:
            result = recognizer.recognize(cell)
    """

    def __init__(self, tesseract_cmd: Optional[str] = None, timeout: float = 0,
                 config: str = TESSERACT_CONFIG, verbose: bool = True):
        """
        Args:
            tesseract_cmd: Path to the tesseract executable if it is not on PATH
            timeout: Seconds before a single recognition call is abandoned (0 = no limit)
            config: Command line options passed to tesseract
            verbose: Print engine start-up and per-call failures
        """
        self.tesseract_cmd = tesseract_cmd
        self.timeout = timeout
        self.config = config
        self.verbose = verbose
        self.version = None
        self._active = False
        self._previous_cmd = None

    def __enter__(self):
        self._previous_cmd = pytesseract.pytesseract.tesseract_cmd
        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd
        try:
            self.version = pytesseract.get_tesseract_version()
        except Exception:
            pytesseract.pytesseract.tesseract_cmd = self._previous_cmd
            raise
        self._active = True
        if self.verbose:
            print(f"      Tesseract {self.version} ready")
        return self

    def __exit__(self, exc_type, exc, tb):
        self._active = False
        pytesseract.pytesseract.tesseract_cmd = self._previous_cmd
        return False

    def recognize(self, image: np.ndarray) -> RecognitionResult:
        if not self._active:
            raise RuntimeError("TesseractRecognizer must be used inside a 'with' block")

        try:
            data = pytesseract.image_to_data(image, config=self.config,
                                             output_type=pytesseract.Output.DICT,
                                             timeout=self.timeout)
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            # A failed call is just an empty vote; the other samples cover it.
            if self.verbose:
                print(f"      ! Tesseract failed on a cell sample: {e}")
            return RecognitionResult("", -1.0)

        words = []
        confidences = []
        for text, conf in zip(data.get("text", []), data.get("conf", [])):
            text = str(text).strip()
            if not text:
                continue
            words.append(text)
            confidences.append(float(conf))

        return RecognitionResult("".join(words), max(confidences) if confidences else -1.0)
