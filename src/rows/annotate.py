from __future__ import annotations

from typing import Any

from contracts.recognition import Point, RecognitionResult, RecognizedBlock, RecognizedLine, TextElement
from contracts.rows import FrameAnnotation, TextLine

from .cluster import average_width, cluster_lines, line_geometry
from .config import RowClusteringConfig
from .table import group_rows

SKIP_RECOGNITION_FAILED = "recognition_failed"
SKIP_NO_LINES = "no_lines"
SKIP_ZERO_AVERAGE_WIDTH = "zero_average_width"


def _norm_point(p: Point, sx: float, sy: float) -> Point:
    return Point(x=p.x * sx, y=p.y * sy)


def normalize_recognition(result: RecognitionResult) -> RecognitionResult:
    """
    Map every pixel coordinate of `result` into the unit square.

    Results without a positive image size are returned unchanged.
    """

    if result.width_px <= 0 or result.height_px <= 0:
        return result

    sx = 1.0 / result.width_px
    sy = 1.0 / result.height_px

    def norm_line(ln: RecognizedLine) -> RecognizedLine:
        return RecognizedLine(
            text=ln.text,
            bounding_box=ln.bounding_box.scaled(sx, sy),
            corner_points=(None if ln.corner_points is None else [_norm_point(p, sx, sy) for p in ln.corner_points]),
            elements=[TextElement(text=e.text, bounding_box=e.bounding_box.scaled(sx, sy)) for e in ln.elements],
        )

    blocks = [
        RecognizedBlock(text=b.text, bounding_box=b.bounding_box.scaled(sx, sy), lines=[norm_line(ln) for ln in b.lines])
        for b in result.blocks
    ]
    return RecognitionResult(
        ok=result.ok,
        engine=result.engine,
        width_px=result.width_px,
        height_px=result.height_px,
        blocks=blocks,
        errors=list(result.errors),
        meta={**result.meta, "normalized": True},
    )


def lines_from_recognition(result: RecognitionResult) -> list[TextLine]:
    """Flatten blocks -> lines into clustering input (row unset, not excluded)."""

    out: list[TextLine] = []
    for ln in result.lines():
        out.append(
            TextLine(
                text=" ".join(e.text for e in ln.elements),
                bounding_box=line_geometry(ln.elements),
                elements=list(ln.elements),
                corner_points=(None if ln.corner_points is None else list(ln.corner_points)),
            )
        )
    return out


def annotate_recognition(result: RecognitionResult, config: RowClusteringConfig | None = None) -> FrameAnnotation:
    """
    Run the row clustering filter over one frame's recognition result.

    A failed recognition, a frame without lines or one whose average line
    width is zero yields an empty annotation; renderers treat it as "clear".
    """

    config = config or RowClusteringConfig()
    config.validate()

    if not result.ok:
        ann = FrameAnnotation.empty(SKIP_RECOGNITION_FAILED)
        ann.meta["errors"] = [e.code for e in result.errors]
        return ann

    lines = lines_from_recognition(normalize_recognition(result))
    if not lines:
        return FrameAnnotation.empty(SKIP_NO_LINES)
    if average_width(lines) is None:
        return FrameAnnotation.empty(SKIP_ZERO_AVERAGE_WIDTH)

    clustered = cluster_lines(lines, config)
    groups = group_rows(clustered, config.row_tolerance)

    meta: dict[str, Any] = {
        "row_clustering": config.to_dict(),
        "counts": {
            "lines": len(clustered),
            "kept": sum(1 for ln in clustered if not ln.excluded),
            "groups": len(groups),
        },
    }
    return FrameAnnotation(lines=clustered, groups=groups, meta=meta)
