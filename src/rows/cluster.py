from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, Sequence

from contracts.recognition import Rect, TextElement
from contracts.rows import TextLine

from .config import ROW_PRECISION, ROW_TOLERANCE, RowClusteringConfig


def round_to(value: float, places: int) -> float:
    """Round half away from zero to `places` decimals."""

    divisor = 10.0**places
    scaled = abs(value) * divisor
    whole = math.floor(scaled)
    # compare the exact fractional part; `scaled + 0.5` may round up
    if scaled - whole >= 0.5:
        whole += 1
    return math.copysign(whole, value) / divisor


def rows_almost_equal(a: float, b: float, tolerance: float = ROW_TOLERANCE) -> bool:
    return abs(a - b) < tolerance


def line_geometry(elements: Iterable[TextElement]) -> Rect:
    """
    Synthesize a line box from its elements.

    Origin is the minimum element origin; width and height are the SUMS of
    element widths and heights, not the extent of their union.
    """

    boxes = [e.bounding_box for e in elements]
    if not boxes:
        return Rect(0.0, 0.0, 0.0, 0.0)
    return Rect(
        x=min(b.x for b in boxes),
        y=min(b.y for b in boxes),
        width=sum(b.width for b in boxes),
        height=sum(b.height for b in boxes),
    )


def average_width(lines: Sequence[TextLine]) -> float | None:
    """Mean line width of a frame, or None when rows cannot be computed from it."""

    if not lines:
        return None
    avg = sum(ln.bounding_box.width for ln in lines) / len(lines)
    if not avg > 0:
        return None
    return avg


def row_coordinate(box: Rect, avg_width: float, precision: int = ROW_PRECISION) -> float:
    # Horizontal centre of the line, in units of the frame's average line width.
    return round_to((box.width / 2 + box.x) / avg_width, precision)


def assign_rows(lines: Sequence[TextLine], avg_width: float, precision: int = ROW_PRECISION) -> list[float]:
    return [row_coordinate(ln.bounding_box, avg_width, precision) for ln in lines]


def is_relevant(text: str, keywords: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(k in lowered for k in keywords)


def classify(lines: Sequence[TextLine], keywords: Iterable[str]) -> list[bool]:
    """First pass: a line is excluded unless its text contains a keyword."""

    keywords = tuple(keywords)
    return [not is_relevant(ln.text, keywords) for ln in lines]


def _starts_with_digit(text: str) -> bool:
    return text != "" and text[0].isdecimal()


def rescue(
    lines: Sequence[TextLine],
    excluded: Sequence[bool],
    tolerance: float = ROW_TOLERANCE,
) -> list[bool]:
    """
    Second pass: keep digit-first lines that share a row with a kept line.

    Lines are visited in input order against the current flags, so a line
    rescued earlier in the pass counts as kept for the lines after it.
    `excluded` itself is not modified. Every line must already carry a row.
    """

    if len(lines) != len(excluded):
        raise ValueError("lines and excluded flags must have the same length")

    out = list(excluded)
    for i, ln in enumerate(lines):
        if not out[i] or not _starts_with_digit(ln.text):
            continue
        for j, other in enumerate(lines):
            if out[j] or other.text == ln.text:
                continue
            if rows_almost_equal(other.row, ln.row, tolerance):  # type: ignore[arg-type]
                out[i] = False
                break
    return out


def cluster_lines(lines: Sequence[TextLine], config: RowClusteringConfig | None = None) -> list[TextLine]:
    """
    Assign a row coordinate and an exclusion flag to every line of one frame.

    Returns new TextLine values in input order. An empty frame, or one whose
    average line width is not positive, returns the lines unchanged.
    """

    config = config or RowClusteringConfig()
    config.validate()

    lines = list(lines)
    avg = average_width(lines)
    if avg is None:
        return lines

    rows = assign_rows(lines, avg, config.row_precision)
    with_rows = [replace(ln, row=r, excluded=False) for ln, r in zip(lines, rows)]

    first_pass = classify(with_rows, config.keywords)
    final = rescue(with_rows, first_pass, config.row_tolerance)

    return [replace(ln, excluded=flag) for ln, flag in zip(with_rows, final)]
