from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

import cv2
import numpy as np

from contracts.recognition import Point, Rect
from contracts.rows import RowGroup

Color = tuple[int, int, int]  # BGR

GREEN: Color = (0, 255, 0)
WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)


class RenderSurface(ABC):
    """
    Output collaborator for one view: shapes, floating labels, results panel.

    All coordinates are view coordinates. `clear()` removes every overlay and
    the panel; calling it twice is harmless.
    """

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def draw_shape(self, points: Sequence[Point], color: Color = GREEN) -> None:
        raise NotImplementedError

    @abstractmethod
    def place_label(self, rect: Rect, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_results_panel(self, groups: Sequence[RowGroup]) -> None:
        raise NotImplementedError

    def view_size_for(self, image_width: int, image_height: int) -> tuple[int, int]:
        """View (width, height) that a frame of the given size is displayed in."""

        return image_width, image_height


@dataclass(frozen=True, slots=True)
class _Shape:
    points: list[Point]
    color: Color


@dataclass(frozen=True, slots=True)
class _Label:
    rect: Rect
    text: str


class OpenCvSurface(RenderSurface):
    """
    Records overlay requests and paints them onto frames with OpenCV.

    `compose()` resizes (aspect-fill) the frame into the view before drawing.
    Without an explicit view size the first composed frame fixes it.
    """

    font = cv2.FONT_HERSHEY_SIMPLEX
    label_max_scale = 0.6
    panel_row_height = 28
    panel_padding = 8

    def __init__(self, view_width: int | None = None, view_height: int | None = None) -> None:
        if (view_width is None) != (view_height is None):
            raise ValueError("view_width and view_height must be given together")
        if view_width is not None and (view_width <= 0 or view_height <= 0):  # type: ignore[operator]
            raise ValueError("view size must be positive")
        self.view_width = view_width
        self.view_height = view_height
        self.shapes: list[_Shape] = []
        self.labels: list[_Label] = []
        self.panel: list[RowGroup] | None = None

    def clear(self) -> None:
        self.shapes = []
        self.labels = []
        self.panel = None

    def draw_shape(self, points: Sequence[Point], color: Color = GREEN) -> None:
        if len(points) < 2:
            return
        self.shapes.append(_Shape(points=list(points), color=color))

    def place_label(self, rect: Rect, text: str) -> None:
        self.labels.append(_Label(rect=rect, text=text))

    def set_results_panel(self, groups: Sequence[RowGroup]) -> None:
        self.panel = list(groups) if groups else None

    def _fit_font_scale(self, text: str, width: float) -> float:
        # Shrink the label until it fits the element width.
        (text_w, _), _ = cv2.getTextSize(text, self.font, 1.0, 1)
        if text_w <= 0 or width <= 0:
            return self.label_max_scale
        return max(0.2, min(self.label_max_scale, width / text_w))

    @property
    def has_view_size(self) -> bool:
        return self.view_width is not None

    def view_size_for(self, image_width: int, image_height: int) -> tuple[int, int]:
        # The first frame fixes an unset view; later frames are aspect-filled into it.
        if self.view_width is None or self.view_height is None:
            self.view_width, self.view_height = image_width, image_height
        return self.view_width, self.view_height

    def _aspect_fill(self, image: np.ndarray) -> np.ndarray:
        h, w = image.shape[:2]
        self.view_size_for(w, h)
        if (w, h) == (self.view_width, self.view_height):
            return image.copy()
        scale = max(self.view_width / w, self.view_height / h)
        resized = cv2.resize(image, (max(1, round(w * scale)), max(1, round(h * scale))))
        rh, rw = resized.shape[:2]
        x0 = (rw - self.view_width) // 2
        y0 = (rh - self.view_height) // 2
        return resized[y0 : y0 + self.view_height, x0 : x0 + self.view_width].copy()

    def _draw_panel(self, canvas: np.ndarray, groups: list[RowGroup]) -> None:
        height = self.panel_row_height * len(groups) + self.panel_padding
        top = max(0, self.view_height - height)
        cv2.rectangle(canvas, (0, top), (self.view_width, self.view_height), BLACK, thickness=-1)

        for i, group in enumerate(groups):
            if not group.texts:
                continue
            cell_w = self.view_width / len(group.texts)
            baseline = top + self.panel_padding // 2 + (i + 1) * self.panel_row_height - 8
            for j, text in enumerate(group.texts):
                x = int(j * cell_w) + self.panel_padding // 2
                scale = self._fit_font_scale(text, cell_w - self.panel_padding)
                cv2.putText(canvas, text, (x, baseline), self.font, scale, WHITE, 1, cv2.LINE_AA)

    def compose(self, image: np.ndarray) -> np.ndarray:
        """Return a view-sized copy of `image` with every recorded overlay drawn."""

        canvas = self._aspect_fill(image)

        for shape in self.shapes:
            pts = np.array([[round(p.x), round(p.y)] for p in shape.points], dtype=np.int32)
            cv2.polylines(canvas, [pts.reshape((-1, 1, 2))], isClosed=True, color=shape.color, thickness=2)

        for label in self.labels:
            scale = self._fit_font_scale(label.text, label.rect.width)
            origin = (round(label.rect.x), round(label.rect.y1))
            cv2.putText(canvas, label.text, origin, self.font, scale, WHITE, 1, cv2.LINE_AA)

        if self.panel:
            self._draw_panel(canvas, self.panel)

        return canvas
