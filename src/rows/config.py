from __future__ import annotations

from dataclasses import dataclass, field

# Two row coordinates closer than this are treated as the same visual row.
ROW_TOLERANCE = 0.5

# Row coordinates are rounded to this many decimal places before comparison.
ROW_PRECISION = 2

DEFAULT_KEYWORDS: frozenset[str] = frozenset(
    {
        "calories",
        "sugar",
        "fat",
        "saturated",
        "salt",
        "serving",
        "energy",
        "nutrition",
        "facts",
    }
)


def _normalize_keywords(keywords: frozenset[str] | set[str] | list[str] | tuple[str, ...]) -> frozenset[str]:
    return frozenset(k.strip().lower() for k in keywords if k.strip() != "")


@dataclass(frozen=True, slots=True)
class RowClusteringConfig:
    """
    Row clustering parameters.

    Keywords are matched as case-insensitive substrings; they are stored
    lowercased. Defaults reproduce the nutrition-label reading use case.
    """

    keywords: frozenset[str] = field(default=DEFAULT_KEYWORDS)
    row_tolerance: float = ROW_TOLERANCE
    row_precision: int = ROW_PRECISION

    def __post_init__(self) -> None:
        # frozen + slots: bypass the generated __setattr__ guard
        object.__setattr__(self, "keywords", _normalize_keywords(self.keywords))

    def validate(self) -> None:
        if not self.keywords:
            raise ValueError("keywords must contain at least one non-empty keyword")
        if self.row_tolerance <= 0:
            raise ValueError("row_tolerance must be > 0")
        if self.row_precision < 0:
            raise ValueError("row_precision must be >= 0")

    def to_dict(self) -> dict[str, object]:
        return {
            "keywords": sorted(self.keywords),
            "row_tolerance": self.row_tolerance,
            "row_precision": self.row_precision,
        }


def parse_keywords_csv(raw: str | None) -> frozenset[str]:
    """Parse a comma separated keyword list; None or blank yields the defaults."""

    if raw is None or raw.strip() == "":
        return DEFAULT_KEYWORDS
    return _normalize_keywords(raw.split(","))
