from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.recognition import RecognitionResult


def serialize_recognition_result(result: RecognitionResult) -> str:
    """
    Stable JSON serialization for debugging artifacts.
    """

    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_recognition_json_artifact(*, result: RecognitionResult, out_file: Path) -> None:
    """
    Write recognition output to a JSON artifact file.

    The written file is valid input for `td-rows --input`.
    """

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_recognition_result(result), encoding="utf-8")
