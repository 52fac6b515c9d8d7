from __future__ import annotations

from .contracts import FrameSourceConfig, FrameSourceKind
from .sources import CameraFrameSource, FrameSource, ImageFileFrameSource, PdfFrameSource


def open_frame_source(config: FrameSourceConfig) -> FrameSource:
    """Build (not yet open) the frame source described by `config`."""

    if config.kind == FrameSourceKind.CAMERA:
        return CameraFrameSource(
            config.camera_index,
            capture_width=config.capture_width,
            capture_height=config.capture_height,
        )
    if config.kind == FrameSourceKind.VIDEO:
        return CameraFrameSource(str(config.path))
    if config.kind == FrameSourceKind.IMAGE:
        return ImageFileFrameSource(config.path, repeat=config.repeat)  # type: ignore[arg-type]
    if config.kind == FrameSourceKind.PDF:
        return PdfFrameSource(config.path, dpi=config.dpi, page_selection=config.page_selection)  # type: ignore[arg-type]
    raise ValueError(f"Unsupported frame source: {config.kind}")
