from __future__ import annotations

from pathlib import Path

from contracts.recognition import RecognitionResult

from .contracts import RecognizerConfig, RecognizerEngineName
from .engines.base import TextRecognizer
from .engines.tesseract_cli import TesseractCliEngine


def get_recognizer(config: RecognizerConfig) -> TextRecognizer:
    if config.engine == RecognizerEngineName.TESSERACT_CLI:
        return TesseractCliEngine(config)
    raise ValueError(f"Unsupported recognition engine: {config.engine}")


def recognize_image_file(*, config: RecognizerConfig, image_file: Path) -> RecognitionResult:
    """
    Run text recognition on an explicit image file path.

    PDFs are rejected here; render them to frames with `frames.PdfFrameSource`.
    """

    if image_file.suffix.lower() == ".pdf":
        return RecognitionResult.failed(
            engine=config.engine.value,
            code="OCR_INPUT_IS_PDF",
            message="Recognition rejects PDF inputs; render pages to frames first.",
            detail={"image_file": str(image_file)},
        )

    return get_recognizer(config).recognize_image_file(image_file)
