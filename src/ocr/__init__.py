"""
Text recognition (perception only).

Contract:
- Input: one frame (BGR ndarray) or an image file
- Output: blocks -> lines -> elements with text and pixel bounding boxes
- Constraints: no correction, no relevance filtering; optional confidence floor

Failures are reported in the result (`ok=False`, coded errors), not raised.
"""

from .contracts import RecognizerConfig, RecognizerEngineName
from .engines import TesseractCliEngine, TextRecognizer, parse_tesseract_tsv
from .module import get_recognizer, recognize_image_file

__all__ = [
    "RecognizerConfig",
    "RecognizerEngineName",
    "TesseractCliEngine",
    "TextRecognizer",
    "get_recognizer",
    "parse_tesseract_tsv",
    "recognize_image_file",
]
