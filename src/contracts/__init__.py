"""
Canonical contracts shared by the recognizer, the row clustering filter and
the overlay renderer.

Stage code should consume/produce these contract objects (not ad-hoc dicts).
Coordinates are image pixels out of a recognizer and the unit square once a
result has been normalized for clustering.
"""

from .recognition import (
    Point,
    RecognitionError,
    RecognitionResult,
    RecognizedBlock,
    RecognizedLine,
    Rect,
    TextElement,
)
from .rows import FrameAnnotation, RowGroup, TextLine

__all__ = [
    "Point",
    "Rect",
    "TextElement",
    "RecognizedLine",
    "RecognizedBlock",
    "RecognitionError",
    "RecognitionResult",
    "TextLine",
    "RowGroup",
    "FrameAnnotation",
]
