from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import cv2
import numpy as np

from ..contracts import Frame, FrameSourceError
from .base import FrameSource


def parse_page_selection(selection: str | None, *, page_count: int) -> list[int]:
    """
    Parse "1,3-5" into a sorted list of unique 1-indexed page numbers.
    None => all pages.
    """

    if selection is None or selection.strip() == "":
        return list(range(1, page_count + 1))

    pages: set[int] = set()
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            a_str, b_str = part.split("-", 1)
            a = int(a_str.strip())
            b = int(b_str.strip())
            if a <= 0 or b <= 0:
                raise ValueError("page numbers must be >= 1")
            if b < a:
                raise ValueError(f"invalid range: {part!r}")
            pages.update(range(a, b + 1))
        else:
            p = int(part)
            if p <= 0:
                raise ValueError("page numbers must be >= 1")
            pages.add(p)

    ordered = sorted(pages)
    if ordered and ordered[-1] > page_count:
        raise ValueError(f"page selection out of bounds (1..{page_count})")
    return ordered


class PdfFrameSource(FrameSource):
    """
    Scanned label documents: each selected PDF page becomes one frame.

    Pages are rendered with pypdfium2 at `dpi` (PDF points are 1/72 inch).
    """

    def __init__(self, path: Path, *, dpi: int = 150, page_selection: str | None = None) -> None:
        if dpi <= 0:
            raise ValueError("dpi must be a positive integer")
        self.path = path
        self.dpi = dpi
        self.page_selection = page_selection
        self._doc: Any = None
        self._pages: list[int] = []

    def describe(self) -> str:
        return f"pdf:{self.path}"

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError("Missing dependency: pypdfium2 is required for PDF frame sources.") from e

    def open(self) -> None:
        if not self.path.exists():
            raise FrameSourceError(f"PDF file not found: {self.path}")
        pdfium = self._require_pdfium()
        try:
            self._doc = pdfium.PdfDocument(str(self.path))
        except pdfium.PdfiumError as e:
            raise FrameSourceError(f"PDF file could not be opened: {self.path}") from e
        try:
            self._pages = parse_page_selection(self.page_selection, page_count=len(self._doc))
        except ValueError as e:
            self.close()
            raise FrameSourceError(f"Invalid page selection {self.page_selection!r} for {self.path}: {e}") from e

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None
        self._pages = []

    def page_count(self) -> int:
        if self._doc is None:
            raise FrameSourceError(f"{self.describe()} is not open")
        return len(self._doc)

    def frames(self) -> Iterator[Frame]:
        if self._doc is None:
            raise FrameSourceError(f"{self.describe()} is not open")
        scale = self.dpi / 72.0

        for seq, page_num in enumerate(self._pages, start=1):
            page = self._doc[page_num - 1]
            bitmap = page.render(scale=scale)
            pil_img = bitmap.to_pil().convert("RGB")
            image = cv2.cvtColor(np.asarray(pil_img), cv2.COLOR_RGB2BGR)
            yield Frame.from_image(seq=seq, image=image, source=f"{self.describe()}#page={page_num}")
