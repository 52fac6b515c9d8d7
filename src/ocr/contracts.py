from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RecognizerEngineName(str, Enum):
    """
    Text recognition backends supported by this module.

    Recognizers are perception only: literal text hypotheses and boxes, no
    correction, no relevance filtering (that belongs to the row clustering filter).
    """

    TESSERACT_CLI = "tesseract_cli"


@dataclass(frozen=True, slots=True)
class RecognizerConfig:
    engine: RecognizerEngineName = RecognizerEngineName.TESSERACT_CLI
    language: str = "eng"  # engine hint only
    psm: int | None = None  # Tesseract page segmentation mode; if None, use default.
    timeout_s: float = 30.0
    confidence_floor: float = 0.0  # words below this normalized confidence are dropped
    binary: str = "tesseract"

    def __post_init__(self) -> None:
        if self.confidence_floor < 0.0 or self.confidence_floor > 1.0:
            raise ValueError("confidence_floor must be within [0.0, 1.0]")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        if self.psm is not None and not (0 <= self.psm <= 13):
            raise ValueError("psm must be within [0, 13]")
        if self.language.strip() == "":
            raise ValueError("language must be non-empty")

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine": self.engine.value,
            "language": self.language,
            "psm": self.psm,
            "timeout_s": self.timeout_s,
            "confidence_floor": self.confidence_floor,
        }
