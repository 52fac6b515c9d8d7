from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.rows import FrameAnnotation


def serialize_frame_annotation(annotation: FrameAnnotation) -> str:
    payload: dict[str, Any] = annotation.to_dict()
    return (
        json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), indent=2)
        + "\n"
    )


def write_annotation_json_artifact(*, annotation: FrameAnnotation, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_frame_annotation(annotation), encoding="utf-8")
