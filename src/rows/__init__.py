"""
Row clustering filter.

Turns one frame's recognized text lines into:
- a row coordinate per line (horizontal centre over the frame's average line width)
- an exclusion flag per line (keyword match, then digit-first rescue on the same row)
- a results table of kept texts bucketed by row

No OCR, no rendering, no I/O beyond the optional JSON artifacts.
"""

from .annotate import annotate_recognition, lines_from_recognition, normalize_recognition
from .cluster import classify, cluster_lines, line_geometry, rescue, rows_almost_equal
from .config import DEFAULT_KEYWORDS, ROW_TOLERANCE, RowClusteringConfig
from .table import group_rows

__all__ = [
    "DEFAULT_KEYWORDS",
    "ROW_TOLERANCE",
    "RowClusteringConfig",
    "annotate_recognition",
    "classify",
    "cluster_lines",
    "group_rows",
    "line_geometry",
    "lines_from_recognition",
    "normalize_recognition",
    "rescue",
    "rows_almost_equal",
]
