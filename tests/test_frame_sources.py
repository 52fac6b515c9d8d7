from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

import cv2
import numpy as np
import pypdfium2 as pdfium

from contracts.recognition import Point
from frames.contracts import FrameSourceConfig, FrameSourceError, FrameSourceKind
from frames.module import open_frame_source
from frames.sources import CameraFrameSource, ImageFileFrameSource, PdfFrameSource
from frames.sources.pdf import parse_page_selection


class TestImageFileFrameSource(unittest.TestCase):
    def test_still_image_is_repeated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "label.png"
            cv2.imwrite(str(path), np.full((30, 40, 3), 200, dtype=np.uint8))

            with ImageFileFrameSource(path, repeat=2) as source:
                frames = list(source.frames())

        self.assertEqual([f.seq for f in frames], [1, 2])
        self.assertEqual((frames[0].width_px, frames[0].height_px), (40, 30))
        self.assertEqual(frames[0].source, f"image:{path}")
        self.assertIsNot(frames[0].image, frames[1].image)

    def test_missing_or_undecodable_image_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FrameSourceError):
                ImageFileFrameSource(Path(tmp) / "missing.png").open()

            junk = Path(tmp) / "junk.png"
            junk.write_bytes(b"not an image")
            with self.assertRaises(FrameSourceError):
                ImageFileFrameSource(junk).open()

    def test_frames_require_open_source(self) -> None:
        with self.assertRaises(FrameSourceError):
            list(ImageFileFrameSource(Path("label.png")).frames())


class TestPdfFrameSource(unittest.TestCase):
    def _write_pdf(self, path: Path) -> None:
        pdf = pdfium.PdfDocument.new()
        pdf.new_page(144, 72)
        pdf.new_page(72, 72)
        pdf.save(str(path))
        pdf.close()

    def test_pages_become_frames(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "label.pdf"
            self._write_pdf(path)

            with PdfFrameSource(path, dpi=72) as source:
                self.assertEqual(source.page_count(), 2)
                frames = list(source.frames())

            with PdfFrameSource(path, dpi=144, page_selection="2") as source:
                selected = list(source.frames())

        self.assertEqual([f.seq for f in frames], [1, 2])
        self.assertEqual((frames[0].width_px, frames[0].height_px), (144, 72))
        self.assertEqual(frames[0].image.shape, (72, 144, 3))
        self.assertEqual(frames[1].source, f"pdf:{path}#page=2")

        self.assertEqual(len(selected), 1)
        self.assertEqual((selected[0].width_px, selected[0].height_px), (144, 144))

    def test_invalid_page_selection_raises_on_open(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "label.pdf"
            self._write_pdf(path)

            for selection in ("3", "x", "2-1"):
                with self.subTest(selection=selection):
                    source = PdfFrameSource(path, page_selection=selection)
                    with self.assertRaises(FrameSourceError):
                        source.open()
                    with self.assertRaises(FrameSourceError):
                        source.page_count()

    def test_missing_pdf_raises(self) -> None:
        with self.assertRaises(FrameSourceError):
            PdfFrameSource(Path("/nonexistent/label.pdf")).open()


class TestPageSelection(unittest.TestCase):
    def test_all_pages_by_default(self) -> None:
        self.assertEqual(parse_page_selection(None, page_count=3), [1, 2, 3])
        self.assertEqual(parse_page_selection(" ", page_count=2), [1, 2])

    def test_ranges_are_sorted_and_unique(self) -> None:
        self.assertEqual(parse_page_selection("3-4, 1,3", page_count=5), [1, 3, 4])

    def test_invalid_selections_are_rejected(self) -> None:
        for selection in ("0", "3-2", "6", "x"):
            with self.subTest(selection=selection):
                with self.assertRaises(ValueError):
                    parse_page_selection(selection, page_count=5)


class TestOpenFrameSource(unittest.TestCase):
    def test_factory_builds_each_kind(self) -> None:
        path = Path("label.png")
        self.assertIsInstance(open_frame_source(FrameSourceConfig()), CameraFrameSource)
        video = open_frame_source(FrameSourceConfig(kind=FrameSourceKind.VIDEO, path=Path("clip.mp4")))
        self.assertIsInstance(video, CameraFrameSource)
        self.assertEqual(video.describe(), "video:clip.mp4")
        self.assertIsInstance(open_frame_source(FrameSourceConfig(kind=FrameSourceKind.IMAGE, path=path)), ImageFileFrameSource)
        self.assertIsInstance(
            open_frame_source(FrameSourceConfig(kind=FrameSourceKind.PDF, path=Path("label.pdf"))), PdfFrameSource
        )

    def test_path_is_required_for_file_sources(self) -> None:
        with self.assertRaises(ValueError):
            FrameSourceConfig(kind=FrameSourceKind.IMAGE)

    def test_unreadable_video_raises(self) -> None:
        source = CameraFrameSource("/nonexistent/clip.mp4")
        with self.assertRaises(FrameSourceError):
            source.open()
        self.assertFalse(source.request_focus(Point(0.5, 0.5)))


if __name__ == "__main__":
    unittest.main()
