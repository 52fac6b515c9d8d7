from __future__ import annotations

import logging

import cv2

from frames.contracts import Frame
from frames.sources.base import FrameSource
from overlay.surface import OpenCvSurface

from .focus import focus_point_for_touch

logger = logging.getLogger(__name__)

_QUIT_KEYS = {ord("q"), 27}  # q, Esc


class PreviewWindow:
    """
    OpenCV preview window: shows composed frames, quits on q/Esc, and turns
    left clicks into focus requests on the frame source.
    """

    def __init__(self, *, title: str, surface: OpenCvSurface, source: FrameSource) -> None:
        self.title = title
        self.surface = surface
        self.source = source

    def __enter__(self) -> "PreviewWindow":
        cv2.namedWindow(self.title, cv2.WINDOW_AUTOSIZE)
        cv2.setMouseCallback(self.title, self._on_mouse)
        return self

    def __exit__(self, *exc: object) -> None:
        cv2.destroyWindow(self.title)

    def _on_mouse(self, event: int, x: int, y: int, flags: int, param: object) -> None:
        if event != cv2.EVENT_LBUTTONDOWN or not self.surface.has_view_size:
            return
        point = focus_point_for_touch(x, y, self.surface.view_width, self.surface.view_height)  # type: ignore[arg-type]
        if not self.source.request_focus(point):
            logger.warning("There was an error focusing the device's camera at (%.2f, %.2f)", point.x, point.y)

    def __call__(self, frame: Frame) -> bool:
        cv2.imshow(self.title, self.surface.compose(frame.image))
        key = cv2.waitKey(1) & 0xFF
        return key not in _QUIT_KEYS

    def hold(self) -> None:
        """Block until q/Esc is pressed (still images and PDFs)."""

        while (cv2.waitKey(50) & 0xFF) not in _QUIT_KEYS:
            if cv2.getWindowProperty(self.title, cv2.WND_PROP_VISIBLE) < 1:
                return
