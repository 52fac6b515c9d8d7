from __future__ import annotations

import logging
from typing import Iterator

import cv2

from contracts.recognition import Point

from ..contracts import Frame, FrameSourceError
from .base import FrameSource

logger = logging.getLogger(__name__)


class CameraFrameSource(FrameSource):
    """
    Live camera (device index) or video file, read through OpenCV.

    The stream ends when the device stops delivering frames.
    """

    def __init__(
        self,
        device: int | str = 0,
        *,
        capture_width: int | None = None,
        capture_height: int | None = None,
    ) -> None:
        self.device = device
        self.capture_width = capture_width
        self.capture_height = capture_height
        self._capture: cv2.VideoCapture | None = None

    def describe(self) -> str:
        if isinstance(self.device, int):
            return f"camera:{self.device}"
        return f"video:{self.device}"

    def open(self) -> None:
        if self._capture is not None:
            return
        capture = cv2.VideoCapture(self.device)
        if not capture.isOpened():
            capture.release()
            raise FrameSourceError(f"Failed to open capture device: {self.describe()}")

        if self.capture_width is not None:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.capture_width)
        if self.capture_height is not None:
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.capture_height)
        # Keep the driver buffer short so frames stay close to real time.
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        logger.info(
            "Opened %s at %dx%d",
            self.describe(),
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        self._capture = capture

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None

    def frames(self) -> Iterator[Frame]:
        if self._capture is None:
            raise FrameSourceError(f"{self.describe()} is not open")

        seq = 0
        while True:
            ok, image = self._capture.read()
            if not ok or image is None:
                logger.info("%s: no more frames after seq=%d", self.describe(), seq)
                return
            seq += 1
            yield Frame.from_image(seq=seq, image=image, source=self.describe())

    def request_focus(self, point: Point) -> bool:
        # OpenCV exposes no point-of-interest focus; re-trigger autofocus instead.
        if self._capture is None:
            return False
        supported = bool(self._capture.set(cv2.CAP_PROP_AUTOFOCUS, 1))
        if not supported:
            logger.warning("%s: focusing at (%.2f, %.2f) is not supported", self.describe(), point.x, point.y)
        return supported
