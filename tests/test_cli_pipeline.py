from __future__ import annotations

import io
import json
import subprocess
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

import cv2
import numpy as np

from contracts.recognition import RecognitionResult
from contracts.rows import FrameAnnotation
from ocr.cli import main as ocr_main
from rows.cli import main as rows_main
from rows.debug_print import main as debug_print_main

_TSV = "\n".join(
    [
        "level\tpage_num\tblock_num\tpar_num\tline_num\tword_num\tleft\ttop\twidth\theight\tconf\ttext",
        "4\t1\t1\t1\t1\t0\t100\t100\t200\t30\t-1\t",
        "5\t1\t1\t1\t1\t1\t100\t100\t200\t30\t95\tSugar",
        "4\t1\t1\t1\t2\t0\t150\t150\t100\t30\t-1\t",
        "5\t1\t1\t1\t2\t1\t150\t150\t100\t30\t93\t12g",
        "4\t1\t2\t1\t1\t0\t600\t100\t200\t30\t-1\t",
        "5\t1\t2\t1\t1\t1\t600\t100\t200\t30\t90\tProtein",
    ]
) + "\n"


def _run(main, argv: list[str]) -> tuple[int, str]:
    buf = io.StringIO()
    with redirect_stdout(buf):
        rc = main(argv)
    return rc, buf.getvalue()


class TestCliPipeline(unittest.TestCase):
    def test_image_to_row_table(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            image = root / "label.png"
            cv2.imwrite(str(image), np.full((500, 1000, 3), 255, dtype=np.uint8))
            recognition_json = root / "out" / "recognition.json"
            annotation_json = root / "out" / "annotation.json"

            completed = subprocess.CompletedProcess(args=["tesseract"], returncode=0, stdout=_TSV.encode(), stderr=b"")
            with mock.patch("ocr.engines.tesseract_cli.subprocess.run", return_value=completed):
                rc, out = _run(ocr_main, ["--image", str(image), "--output", str(recognition_json)])

            self.assertEqual(rc, 0)
            self.assertEqual(json.loads(out), {"blocks": 2, "errors": [], "lines": 3, "ok": True})
            recognition = RecognitionResult.from_dict(json.loads(recognition_json.read_text(encoding="utf-8")))
            self.assertEqual((recognition.width_px, recognition.height_px), (1000, 500))

            rc, out = _run(rows_main, ["--input", str(recognition_json), "--output", str(annotation_json)])
            self.assertEqual(rc, 0)
            self.assertEqual(json.loads(out), {"groups": 1, "kept": 2, "lines": 3, "ok": True, "skipped": None})

            first = annotation_json.read_bytes()
            annotation = FrameAnnotation.from_dict(json.loads(first))
            self.assertEqual([g.texts for g in annotation.groups], [["Sugar", "12g"]])
            self.assertEqual([ln.excluded for ln in annotation.lines], [False, False, True])

            # rerunning produces byte-identical artifacts
            _run(rows_main, ["--input", str(recognition_json), "--output", str(annotation_json)])
            self.assertEqual(annotation_json.read_bytes(), first)

            rc, out = _run(debug_print_main, ["--annotation", str(annotation_json), "--kept-only"])
            self.assertEqual(rc, 0)
            self.assertIn(":: Sugar", out)
            self.assertIn(":: 12g", out)
            self.assertNotIn("Protein", out)
            self.assertIn("| Sugar | 12g", out)

    def test_failed_recognition_exits_nonzero(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            image = root / "label.png"
            cv2.imwrite(str(image), np.zeros((10, 10, 3), dtype=np.uint8))
            recognition_json = root / "recognition.json"
            annotation_json = root / "annotation.json"

            with mock.patch("ocr.engines.tesseract_cli.subprocess.run", side_effect=FileNotFoundError):
                rc, out = _run(ocr_main, ["--image", str(image), "--output", str(recognition_json)])
            self.assertEqual(rc, 2)
            self.assertEqual(json.loads(out)["errors"], ["OCR_BACKEND_NOT_INSTALLED"])

            rc, out = _run(rows_main, ["--input", str(recognition_json), "--output", str(annotation_json)])
            self.assertEqual(rc, 2)
            self.assertEqual(json.loads(out)["skipped"], "recognition_failed")

            rc, out = _run(debug_print_main, ["--annotation", str(annotation_json)])
            self.assertEqual(out.strip(), "skipped: recognition_failed")

    def test_frame_without_lines_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            recognition_json = root / "recognition.json"
            annotation_json = root / "annotation.json"
            recognition_json.write_text(
                json.dumps({"ok": True, "engine": "tesseract_cli", "width_px": 100, "height_px": 100, "blocks": []}),
                encoding="utf-8",
            )

            rc, out = _run(rows_main, ["--input", str(recognition_json), "--output", str(annotation_json), "--keywords", "protein"])
            self.assertEqual(rc, 0)
            self.assertEqual(json.loads(out)["skipped"], "no_lines")


if __name__ == "__main__":
    unittest.main()
