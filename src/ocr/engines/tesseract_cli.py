from __future__ import annotations

import csv
import subprocess
from collections import defaultdict
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from contracts.recognition import RecognitionResult, RecognizedBlock, RecognizedLine, Rect, TextElement

from ..contracts import RecognizerConfig, RecognizerEngineName
from .base import TextRecognizer

# Tesseract TSV levels: 1=page, 2=block, 3=paragraph, 4=line, 5=word
_LEVEL_BLOCK = 2
_LEVEL_LINE = 4
_LEVEL_WORD = 5

_BlockKey = tuple[int, int]  # (page_num, block_num)
_LineKey = tuple[int, int, int, int]  # (page_num, block_num, par_num, line_num)


def _normalize_confidence(raw_conf: float | None) -> float | None:
    if raw_conf is None:
        return None
    if raw_conf < 0:
        return None
    # Tesseract TSV is typically 0..100; clamp into [0, 1]
    return max(0.0, min(1.0, raw_conf / 100.0))


def _int(row: dict[str, Any], name: str, default: str = "0") -> int:
    return int(row.get(name, "") or default)


def _union_all(boxes: list[Rect]) -> Rect:
    out = boxes[0]
    for b in boxes[1:]:
        out = out.union(b)
    return out


def parse_tesseract_tsv(tsv: str, *, confidence_floor: float = 0.0) -> list[RecognizedBlock]:
    """
    Parse `tesseract ... tsv` output into blocks -> lines -> elements.

    Words with blank text or a normalized confidence below `confidence_floor`
    are dropped, as are lines and blocks left without words. Ordering follows
    the engine's structural numbering (block, paragraph, line, word).
    """

    block_boxes: dict[_BlockKey, Rect] = {}
    line_boxes: dict[_LineKey, Rect] = {}
    words: dict[_LineKey, list[tuple[int, TextElement]]] = defaultdict(list)

    reader = csv.DictReader(tsv.splitlines(), delimiter="\t", quoting=csv.QUOTE_NONE)
    for row in reader:
        try:
            level = _int(row, "level")
            page_num = _int(row, "page_num", "1")
            block_num = _int(row, "block_num")
            par_num = _int(row, "par_num")
            line_num = _int(row, "line_num")
            word_num = _int(row, "word_num")
            box = Rect(
                x=float(_int(row, "left")),
                y=float(_int(row, "top")),
                width=float(_int(row, "width")),
                height=float(_int(row, "height")),
            )
        except ValueError:
            # Malformed geometry rows are dropped (no guessing).
            continue

        if level == _LEVEL_BLOCK:
            block_boxes[(page_num, block_num)] = box
            continue
        if level == _LEVEL_LINE:
            line_boxes[(page_num, block_num, par_num, line_num)] = box
            continue
        if level != _LEVEL_WORD:
            continue

        text = row.get("text") or ""
        if text.strip() == "":
            continue

        conf_str = row.get("conf", "")
        try:
            raw_conf = float(conf_str) if conf_str not in ("", None) else None
        except ValueError:
            raw_conf = None
        conf = _normalize_confidence(raw_conf)
        if conf is not None and conf < confidence_floor:
            continue

        words[(page_num, block_num, par_num, line_num)].append((word_num, TextElement(text=text, bounding_box=box)))

    lines_by_block: dict[_BlockKey, list[RecognizedLine]] = defaultdict(list)
    for key in sorted(words.keys()):
        elements = [e for _, e in sorted(words[key], key=lambda x: x[0])]
        line_box = line_boxes.get(key) or _union_all([e.bounding_box for e in elements])
        lines_by_block[(key[0], key[1])].append(
            RecognizedLine(
                text=" ".join(e.text for e in elements),
                bounding_box=line_box,
                corner_points=line_box.corners(),
                elements=elements,
            )
        )

    blocks: list[RecognizedBlock] = []
    for bkey in sorted(lines_by_block.keys()):
        lines = lines_by_block[bkey]
        block_box = block_boxes.get(bkey) or _union_all([ln.bounding_box for ln in lines])
        blocks.append(
            RecognizedBlock(
                text="\n".join(ln.text for ln in lines),
                bounding_box=block_box,
                lines=lines,
            )
        )
    return blocks


class TesseractCliEngine(TextRecognizer):
    """
    Tesseract OCR via the `tesseract` CLI, frame piped through stdin as PNG.

    This engine performs no correction, no merging, and no relevance
    filtering. Only an optional confidence floor is applied.
    """

    def __init__(self, config: RecognizerConfig | None = None) -> None:
        self.config = config or RecognizerConfig()

    def engine_id(self) -> str:
        return RecognizerEngineName.TESSERACT_CLI.value

    def _meta(self) -> dict[str, Any]:
        return {
            "backend": "tesseract",
            "backend_mode": "cli",
            "language": self.config.language,
            "psm": self.config.psm,
            "confidence_floor": self.config.confidence_floor,
        }

    def _command(self) -> list[str]:
        cmd = [self.config.binary, "stdin", "stdout", "-l", self.config.language]
        if self.config.psm is not None:
            cmd.extend(["--psm", str(self.config.psm)])
        # Request TSV output (word-level rows include bounding boxes + conf + text).
        cmd.append("tsv")
        return cmd

    def recognize_image_file(self, image_file: Path) -> RecognitionResult:
        if not image_file.exists():
            return RecognitionResult.failed(
                engine=self.engine_id(),
                code="OCR_INPUT_NOT_FOUND",
                message="Input image file not found",
                detail={"image_file": str(image_file)},
                meta=self._meta(),
            )
        image = cv2.imread(str(image_file), cv2.IMREAD_COLOR)
        if image is None:
            return RecognitionResult.failed(
                engine=self.engine_id(),
                code="OCR_IMAGE_DECODE_FAILED",
                message="Input image file could not be decoded",
                detail={"image_file": str(image_file)},
                meta=self._meta(),
            )
        return self.recognize(image)

    def recognize(self, image: np.ndarray) -> RecognitionResult:
        meta = self._meta()
        height_px, width_px = int(image.shape[0]), int(image.shape[1])

        encoded, buf = cv2.imencode(".png", image)
        if not encoded:
            return RecognitionResult.failed(
                engine=self.engine_id(),
                code="OCR_IMAGE_ENCODE_FAILED",
                message="Frame could not be encoded as PNG",
                detail={"shape": list(image.shape)},
                meta=meta,
            )

        cmd = self._command()
        meta["command"] = cmd

        try:
            proc = subprocess.run(
                cmd,
                input=buf.tobytes(),
                check=False,
                capture_output=True,
                timeout=self.config.timeout_s,
            )
        except FileNotFoundError:
            return RecognitionResult.failed(
                engine=self.engine_id(),
                code="OCR_BACKEND_NOT_INSTALLED",
                message="tesseract binary not found on PATH",
                detail={"expected_command": self.config.binary},
                meta=meta,
            )
        except subprocess.TimeoutExpired:
            return RecognitionResult.failed(
                engine=self.engine_id(),
                code="OCR_TIMEOUT",
                message="OCR backend timed out",
                detail={"timeout_s": self.config.timeout_s},
                meta=meta,
            )

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace")
            return RecognitionResult.failed(
                engine=self.engine_id(),
                code="OCR_BACKEND_ERROR",
                message="OCR backend returned a non-zero exit code",
                detail={"returncode": proc.returncode, "stderr": stderr[-4000:]},
                meta=meta,
            )

        tsv = proc.stdout.decode("utf-8", errors="replace")
        blocks = parse_tesseract_tsv(tsv, confidence_floor=self.config.confidence_floor)
        return RecognitionResult(
            ok=True,
            engine=self.engine_id(),
            width_px=width_px,
            height_px=height_px,
            blocks=blocks,
            errors=[],
            meta=meta,
        )
