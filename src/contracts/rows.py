from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .recognition import Point, Rect, TextElement, points_from_raw


@dataclass(frozen=True, slots=True)
class TextLine:
    """
    One recognized line of a single frame, as seen by the row clustering filter.

    `row` is None until clustering assigns it. Instances are immutable; the
    clustering passes return updated copies.
    """

    text: str
    bounding_box: Rect
    elements: list[TextElement]
    corner_points: list[Point] | None = None
    row: float | None = None
    excluded: bool = False

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "TextLine":
        return TextLine(
            text=str(d.get("text", "")),
            bounding_box=Rect.from_dict(d["bounding_box"]),
            elements=[TextElement.from_dict(e) for e in (d.get("elements") or [])],
            corner_points=points_from_raw(d.get("corner_points")),
            row=(None if d.get("row") is None else float(d["row"])),
            excluded=bool(d.get("excluded", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "bounding_box": self.bounding_box.to_dict(),
            "elements": [e.to_dict() for e in self.elements],
            "corner_points": None if self.corner_points is None else [p.to_dict() for p in self.corner_points],
            "row": self.row,
            "excluded": self.excluded,
        }


@dataclass(frozen=True, slots=True)
class RowGroup:
    row: float  # bucket key (rounded row coordinate)
    texts: list[str]  # ordered, unique across the whole frame

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RowGroup":
        return RowGroup(row=float(d["row"]), texts=[str(t) for t in (d.get("texts") or [])])

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "texts": list(self.texts)}


@dataclass(frozen=True, slots=True)
class FrameAnnotation:
    lines: list[TextLine]  # all lines of the frame, with final row/excluded
    groups: list[RowGroup]  # ascending row key
    meta: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def empty(reason: str | None = None) -> "FrameAnnotation":
        meta: dict[str, Any] = {}
        if reason is not None:
            meta["skipped"] = reason
        return FrameAnnotation(lines=[], groups=[], meta=meta)

    def kept_lines(self) -> list[TextLine]:
        return [ln for ln in self.lines if not ln.excluded]

    def is_empty(self) -> bool:
        return not self.kept_lines()

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "FrameAnnotation":
        return FrameAnnotation(
            lines=[TextLine.from_dict(x) for x in (d.get("lines") or [])],
            groups=[RowGroup.from_dict(x) for x in (d.get("groups") or [])],
            meta=dict(d.get("meta") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "lines": [ln.to_dict() for ln in self.lines],
            "groups": [g.to_dict() for g in self.groups],
            "meta": dict(self.meta),
        }
