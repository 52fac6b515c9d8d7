from __future__ import annotations

from dataclasses import dataclass

from contracts.recognition import Point, Rect


@dataclass(frozen=True, slots=True)
class DisplayTransform:
    """
    Aspect-fill mapping from normalized image coordinates to view coordinates.

    The image is scaled by the larger of the two view/image ratios and
    centred, so it covers the whole view and overflow is cropped evenly.
    """

    image_width: int
    image_height: int
    view_width: int
    view_height: int

    def __post_init__(self) -> None:
        if min(self.image_width, self.image_height, self.view_width, self.view_height) <= 0:
            raise ValueError("image and view sizes must be positive")

    @staticmethod
    def identity(width: int, height: int) -> "DisplayTransform":
        return DisplayTransform(image_width=width, image_height=height, view_width=width, view_height=height)

    @property
    def scale(self) -> float:
        return max(self.view_width / self.image_width, self.view_height / self.image_height)

    @property
    def offset(self) -> tuple[float, float]:
        s = self.scale
        return (
            (self.view_width - self.image_width * s) / 2.0,
            (self.view_height - self.image_height * s) / 2.0,
        )

    def point_to_view(self, p: Point) -> Point:
        s = self.scale
        ox, oy = self.offset
        return Point(x=p.x * self.image_width * s + ox, y=p.y * self.image_height * s + oy)

    def rect_to_view(self, r: Rect) -> Rect:
        origin = self.point_to_view(Point(r.x, r.y))
        s = self.scale
        return Rect(x=origin.x, y=origin.y, width=r.width * self.image_width * s, height=r.height * self.image_height * s)
