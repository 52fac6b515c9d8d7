from __future__ import annotations

from typing import Sequence

from contracts.rows import RowGroup, TextLine

from .cluster import rows_almost_equal
from .config import ROW_TOLERANCE


def group_rows(lines: Sequence[TextLine], tolerance: float = ROW_TOLERANCE) -> list[RowGroup]:
    """
    Build the results table: kept lines bucketed by row, ascending row key.

    Every kept line's row value is a candidate bucket key. A text string is
    placed in the first bucket that claims it and never again, so identical
    texts appear once across the whole table. Lines without a row are ignored.
    """

    kept = [ln for ln in lines if not ln.excluded and ln.row is not None]

    buckets: dict[float, list[str]] = {}
    placed: set[str] = set()

    for key in [ln.row for ln in kept]:
        for ln in kept:
            if ln.text in placed:
                continue
            if rows_almost_equal(ln.row, key, tolerance):  # type: ignore[arg-type]
                buckets.setdefault(key, []).append(ln.text)  # type: ignore[arg-type]
                placed.add(ln.text)

    return [RowGroup(row=k, texts=texts) for k, texts in sorted(buckets.items(), key=lambda kv: kv[0])]
