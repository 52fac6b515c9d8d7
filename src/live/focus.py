from __future__ import annotations

from contracts.recognition import Point


def focus_point_for_touch(x: float, y: float, view_width: float, view_height: float) -> Point:
    """
    Convert a touch in view coordinates to a device focus point.

    Device coordinates are normalized and rotated a quarter turn relative to
    a portrait view: (0, 0) is top-left of the sensor, (1, 1) bottom-right.
    """

    if view_width <= 0 or view_height <= 0:
        raise ValueError("view size must be positive")
    return Point(x=y / view_height, y=1.0 - x / view_width)
