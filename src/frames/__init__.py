"""
Frame sources for the live session.

Sources only produce pixels: no recognition, no filtering. Camera and video
input go through OpenCV; PDF pages are rendered with pypdfium2.
"""

from .contracts import Frame, FrameSourceConfig, FrameSourceError, FrameSourceKind
from .module import open_frame_source
from .sources import CameraFrameSource, FrameSource, ImageFileFrameSource, PdfFrameSource

__all__ = [
    "CameraFrameSource",
    "Frame",
    "FrameSource",
    "FrameSourceConfig",
    "FrameSourceError",
    "FrameSourceKind",
    "ImageFileFrameSource",
    "PdfFrameSource",
    "open_frame_source",
]
