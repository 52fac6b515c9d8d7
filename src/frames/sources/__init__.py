from .base import FrameSource
from .camera import CameraFrameSource
from .image_file import ImageFileFrameSource
from .pdf import PdfFrameSource, parse_page_selection

__all__ = [
    "CameraFrameSource",
    "FrameSource",
    "ImageFileFrameSource",
    "PdfFrameSource",
    "parse_page_selection",
]
