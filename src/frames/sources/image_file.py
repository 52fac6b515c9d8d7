from __future__ import annotations

from pathlib import Path
from typing import Iterator

import cv2
import numpy as np

from ..contracts import Frame, FrameSourceError
from .base import FrameSource


class ImageFileFrameSource(FrameSource):
    """A still image emitted `repeat` times (handy for tuning without a camera)."""

    def __init__(self, path: Path, *, repeat: int = 1) -> None:
        if repeat <= 0:
            raise ValueError("repeat must be a positive integer")
        self.path = path
        self.repeat = repeat
        self._image: np.ndarray | None = None

    def describe(self) -> str:
        return f"image:{self.path}"

    def open(self) -> None:
        if not self.path.exists():
            raise FrameSourceError(f"Image file not found: {self.path}")
        image = cv2.imread(str(self.path), cv2.IMREAD_COLOR)
        if image is None:
            raise FrameSourceError(f"Image file could not be decoded: {self.path}")
        self._image = image

    def close(self) -> None:
        self._image = None

    def frames(self) -> Iterator[Frame]:
        if self._image is None:
            raise FrameSourceError(f"{self.describe()} is not open")
        for seq in range(1, self.repeat + 1):
            yield Frame.from_image(seq=seq, image=self._image.copy(), source=self.describe())
