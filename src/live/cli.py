from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from frames.contracts import FrameSourceConfig, FrameSourceError, FrameSourceKind
from frames.module import open_frame_source
from ocr.contracts import RecognizerConfig
from ocr.module import get_recognizer
from overlay.surface import OpenCvSurface
from rows.config import ROW_TOLERANCE, RowClusteringConfig, parse_keywords_csv

from .config import LiveConfig
from .session import LiveSession
from .window import PreviewWindow

logger = logging.getLogger(__name__)


def _parse_size(raw: str) -> tuple[int, int]:
    w_str, _, h_str = raw.lower().partition("x")
    try:
        w, h = int(w_str), int(h_str)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {raw!r}") from None
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {raw!r}")
    return w, h


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="td-live",
        description="Live text detection: camera/video/image/PDF frames -> OCR -> row clustering -> overlay window.",
    )
    src = p.add_mutually_exclusive_group()
    src.add_argument("--camera", type=int, default=None, help="Camera device index (default: 0).")
    src.add_argument("--video", type=Path, default=None, help="Video file instead of a camera.")
    src.add_argument("--image", type=Path, default=None, help="Still image file.")
    src.add_argument("--pdf", type=Path, default=None, help="PDF document; each page is one frame.")

    p.add_argument("--capture-size", type=_parse_size, default=None, help='Requested camera resolution, e.g. "1280x720".')
    p.add_argument("--display-size", type=_parse_size, default=None, help='Window size, e.g. "720x1280". Default: frame size.')
    p.add_argument("--dpi", type=int, default=150, help="PDF render DPI.")
    p.add_argument("--pages", default=None, help='PDF page selection like "1,3-5". Default: all pages.')

    p.add_argument("--lang", default="eng", help="Tesseract language hint.")
    p.add_argument("--psm", type=int, default=None, help="Tesseract page segmentation mode.")
    p.add_argument("--timeout-s", type=float, default=30.0)
    p.add_argument("--confidence-floor", type=float, default=0.0)

    p.add_argument("--keywords", default=None, help="Comma separated relevance keywords.")
    p.add_argument("--row-tolerance", type=float, default=ROW_TOLERANCE)

    p.add_argument("--max-in-flight", type=int, default=1)
    p.add_argument("--workers", type=int, default=1)
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def _source_config(args: argparse.Namespace) -> FrameSourceConfig:
    capture = args.capture_size
    if args.video is not None:
        return FrameSourceConfig(kind=FrameSourceKind.VIDEO, path=args.video)
    if args.image is not None:
        return FrameSourceConfig(kind=FrameSourceKind.IMAGE, path=args.image)
    if args.pdf is not None:
        return FrameSourceConfig(kind=FrameSourceKind.PDF, path=args.pdf, dpi=args.dpi, page_selection=args.pages)
    return FrameSourceConfig(
        kind=FrameSourceKind.CAMERA,
        camera_index=args.camera or 0,
        capture_width=(None if capture is None else capture[0]),
        capture_height=(None if capture is None else capture[1]),
    )


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    source_config = _source_config(args)
    display_size = args.display_size

    live_config = LiveConfig(
        max_in_flight=args.max_in_flight,
        recognition_workers=args.workers,
        wait_for_result=source_config.kind in (FrameSourceKind.IMAGE, FrameSourceKind.PDF),
        display_size=display_size,
    )
    row_config = RowClusteringConfig(keywords=parse_keywords_csv(args.keywords), row_tolerance=args.row_tolerance)
    recognizer = get_recognizer(
        RecognizerConfig(
            language=args.lang,
            psm=args.psm,
            timeout_s=args.timeout_s,
            confidence_floor=args.confidence_floor,
        )
    )

    source = open_frame_source(source_config)
    surface = OpenCvSurface(*display_size) if display_size else OpenCvSurface()
    window = PreviewWindow(title=live_config.window_title, surface=surface, source=source)

    with window:
        session = LiveSession(
            source=source,
            recognizer=recognizer,
            surface=surface,
            row_config=row_config,
            config=live_config,
            display=window,
        )
        try:
            stats = session.run()
        except FrameSourceError as e:
            logger.error("%s", e)
            return 2
        if source_config.kind in (FrameSourceKind.IMAGE, FrameSourceKind.PDF):
            window.hold()

    print(json.dumps(stats.to_dict(), sort_keys=True, separators=(",", ":")))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
