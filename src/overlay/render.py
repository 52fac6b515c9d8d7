from __future__ import annotations

from contracts.rows import FrameAnnotation

from .geometry import DisplayTransform
from .surface import GREEN, RenderSurface


def render_annotation(annotation: FrameAnnotation, transform: DisplayTransform, surface: RenderSurface) -> None:
    """
    Redraw `surface` from scratch for one annotated frame.

    Kept lines get a highlight shape (when the recognizer supplied corner
    points) and one floating label per element; the results panel shows
    the row table. An empty annotation leaves the surface cleared.
    """

    surface.clear()

    kept = annotation.kept_lines()
    if not kept:
        return

    for ln in kept:
        if ln.corner_points:
            surface.draw_shape([transform.point_to_view(p) for p in ln.corner_points], GREEN)

    for ln in kept:
        for element in ln.elements:
            surface.place_label(transform.rect_to_view(element.bounding_box), element.text)

    if annotation.groups:
        surface.set_results_panel(annotation.groups)
