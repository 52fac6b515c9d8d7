"""Overlay rendering: display transform, rendering surface, annotation renderer."""

from .geometry import DisplayTransform
from .render import render_annotation
from .surface import BLACK, GREEN, WHITE, OpenCvSurface, RenderSurface

__all__ = [
    "BLACK",
    "GREEN",
    "WHITE",
    "DisplayTransform",
    "OpenCvSurface",
    "RenderSurface",
    "render_annotation",
]
