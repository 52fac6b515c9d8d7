from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Point":
        return Point(x=float(d["x"]), y=float(d["y"]))

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Axis-aligned rectangle, origin at the top-left corner.

    Units depend on the producer: image pixels straight out of a recognizer,
    or the unit square once normalized for row clustering.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def x1(self) -> float:
        return self.x + self.width

    @property
    def y1(self) -> float:
        return self.y + self.height

    def corners(self) -> list[Point]:
        # top-left, top-right, bottom-right, bottom-left
        return [
            Point(self.x, self.y),
            Point(self.x1, self.y),
            Point(self.x1, self.y1),
            Point(self.x, self.y1),
        ]

    def union(self, other: "Rect") -> "Rect":
        x0 = min(self.x, other.x)
        y0 = min(self.y, other.y)
        return Rect(x=x0, y=y0, width=max(self.x1, other.x1) - x0, height=max(self.y1, other.y1) - y0)

    def scaled(self, sx: float, sy: float) -> "Rect":
        return Rect(x=self.x * sx, y=self.y * sy, width=self.width * sx, height=self.height * sy)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Rect":
        return Rect(x=float(d["x"]), y=float(d["y"]), width=float(d["width"]), height=float(d["height"]))

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class TextElement:
    """Smallest recognized unit (a word), owned by exactly one line."""

    text: str
    bounding_box: Rect

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "TextElement":
        return TextElement(text=str(d.get("text", "")), bounding_box=Rect.from_dict(d["bounding_box"]))

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "bounding_box": self.bounding_box.to_dict()}


def points_from_raw(raw: Any) -> list[Point] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise TypeError("corner_points must be a list or null")
    return [Point.from_dict(p) for p in raw]


@dataclass(frozen=True, slots=True)
class RecognizedLine:
    text: str
    bounding_box: Rect
    corner_points: list[Point] | None
    elements: list[TextElement]  # recognition order (left-to-right)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognizedLine":
        elements_raw = d.get("elements") or []
        if not isinstance(elements_raw, list):
            raise TypeError("RecognizedLine.elements must be a list")
        return RecognizedLine(
            text=str(d.get("text", "")),
            bounding_box=Rect.from_dict(d["bounding_box"]),
            corner_points=points_from_raw(d.get("corner_points")),
            elements=[TextElement.from_dict(e) for e in elements_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "bounding_box": self.bounding_box.to_dict(),
            "corner_points": None if self.corner_points is None else [p.to_dict() for p in self.corner_points],
            "elements": [e.to_dict() for e in self.elements],
        }


@dataclass(frozen=True, slots=True)
class RecognizedBlock:
    text: str
    bounding_box: Rect
    lines: list[RecognizedLine]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognizedBlock":
        lines_raw = d.get("lines") or []
        if not isinstance(lines_raw, list):
            raise TypeError("RecognizedBlock.lines must be a list")
        return RecognizedBlock(
            text=str(d.get("text", "")),
            bounding_box=Rect.from_dict(d["bounding_box"]),
            lines=[RecognizedLine.from_dict(ln) for ln in lines_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "bounding_box": self.bounding_box.to_dict(),
            "lines": [ln.to_dict() for ln in self.lines],
        }


@dataclass(frozen=True, slots=True)
class RecognitionError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognitionError":
        if "code" not in d:
            raise TypeError("RecognitionError entries must include 'code'")
        detail = d.get("detail")
        return RecognitionError(
            code=str(d["code"]),
            message=str(d.get("message", "")),
            detail=(None if detail is None else dict(detail)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class RecognitionResult:
    """
    Hierarchical recognizer output for a single frame: blocks -> lines -> elements.

    On failure `ok` is False, `blocks` is empty and `errors` carries coded
    entries. Nothing is fabricated to fill in a failed recognition.
    """

    ok: bool
    engine: str
    width_px: int
    height_px: int
    blocks: list[RecognizedBlock]
    errors: list[RecognitionError] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def lines(self) -> list[RecognizedLine]:
        return [ln for b in self.blocks for ln in b.lines]

    @staticmethod
    def failed(
        *, engine: str, code: str, message: str, detail: dict[str, Any] | None = None, meta: dict[str, Any] | None = None
    ) -> "RecognitionResult":
        return RecognitionResult(
            ok=False,
            engine=engine,
            width_px=0,
            height_px=0,
            blocks=[],
            errors=[RecognitionError(code=code, message=message, detail=detail)],
            meta=dict(meta or {}),
        )

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognitionResult":
        blocks_raw = d.get("blocks") or []
        if not isinstance(blocks_raw, list):
            raise TypeError("RecognitionResult.blocks must be a list")
        errors_raw = d.get("errors") or []
        if not isinstance(errors_raw, list):
            raise TypeError("RecognitionResult.errors must be a list")

        errors: list[RecognitionError] = []
        for e in errors_raw:
            if isinstance(e, str):
                errors.append(RecognitionError(code=e, message=""))
            elif isinstance(e, dict):
                errors.append(RecognitionError.from_dict(e))
            else:
                raise TypeError("RecognitionResult.errors entries must be str or dict-with-code")

        return RecognitionResult(
            ok=bool(d.get("ok", False)),
            engine=str(d.get("engine", "")),
            width_px=int(d.get("width_px", 0)),
            height_px=int(d.get("height_px", 0)),
            blocks=[RecognizedBlock.from_dict(b) for b in blocks_raw],
            errors=errors,
            meta=dict(d.get("meta") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "engine": self.engine,
            "width_px": self.width_px,
            "height_px": self.height_px,
            "blocks": [b.to_dict() for b in self.blocks],
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }
