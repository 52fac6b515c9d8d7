from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import numpy as np

from contracts.recognition import RecognitionResult


class TextRecognizer(ABC):
    """
    Interface for text recognition engines.

    IMPORTANT:
    - Engines return literal text hypotheses and boxes in image pixels.
    - Engines report failures as `ok=False` results with coded errors; they do
      not raise for backend problems.
    """

    @abstractmethod
    def engine_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def recognize(self, image: np.ndarray) -> RecognitionResult:
        """Recognize text in a BGR (or grayscale) frame."""

        raise NotImplementedError

    @abstractmethod
    def recognize_image_file(self, image_file: Path) -> RecognitionResult:
        raise NotImplementedError
