from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np


class FrameSourceError(Exception):
    pass


class FrameSourceKind(str, Enum):
    CAMERA = "camera"
    VIDEO = "video"
    IMAGE = "image"
    PDF = "pdf"


@dataclass(frozen=True, slots=True)
class Frame:
    """
    One captured frame.

    `image` is a BGR uint8 array (OpenCV channel order), height x width x 3.
    `seq` increases strictly within one source.
    """

    seq: int
    image: np.ndarray
    width_px: int
    height_px: int
    source: str

    @staticmethod
    def from_image(*, seq: int, image: np.ndarray, source: str) -> "Frame":
        return Frame(seq=seq, image=image, width_px=int(image.shape[1]), height_px=int(image.shape[0]), source=source)


@dataclass(frozen=True, slots=True)
class FrameSourceConfig:
    """
    Frame source selection.

    `camera_index` applies to CAMERA, `path` to VIDEO/IMAGE/PDF.
    """

    kind: FrameSourceKind = FrameSourceKind.CAMERA
    camera_index: int = 0
    path: Path | None = None
    capture_width: int | None = None
    capture_height: int | None = None
    repeat: int = 1  # IMAGE: how many times the still frame is emitted
    dpi: int = 150  # PDF render resolution
    page_selection: str | None = None  # PDF, e.g. "1,3-5"; None => all pages

    def __post_init__(self) -> None:
        if self.kind != FrameSourceKind.CAMERA:
            if self.path is None:
                raise ValueError(f"path is required for {self.kind.value} sources")
            if not isinstance(self.path, Path):
                raise TypeError("path must be a pathlib.Path")
        if self.camera_index < 0:
            raise ValueError("camera_index must be >= 0")
        if self.repeat <= 0:
            raise ValueError("repeat must be a positive integer")
        if self.dpi <= 0:
            raise ValueError("dpi must be a positive integer")
        for name in ("capture_width", "capture_height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be a positive integer")
