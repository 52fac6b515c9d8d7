from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from contracts.recognition import Rect
from contracts.rows import FrameAnnotation


def _load_json(p: Path) -> dict[str, Any]:
    return json.loads(p.read_text(encoding="utf-8"))


def _rect_str(r: Rect) -> str:
    return f"({r.x:.3f},{r.y:.3f}) {r.width:.3f}x{r.height:.3f}"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="td-rows-debug-print")
    ap.add_argument("--annotation", required=True, type=Path, help="Frame annotation JSON artifact.")
    ap.add_argument("--kept-only", action="store_true", help="Hide excluded lines.")
    args = ap.parse_args(argv)

    ann = FrameAnnotation.from_dict(_load_json(args.annotation))

    skipped = ann.meta.get("skipped")
    if skipped:
        print(f"skipped: {skipped}")
        return 0

    print("-- LINES (recognition order) --")
    for ln in ann.lines:
        if args.kept_only and ln.excluded:
            continue
        flag = "x" if ln.excluded else "+"
        row = "-" if ln.row is None else f"{ln.row:.2f}"
        print(f"[{flag}] row={row:>6} box={_rect_str(ln.bounding_box)} :: {ln.text}")

    print("\n-- ROW TABLE --")
    for g in ann.groups:
        print(f"{g.row:>6.2f} | " + " | ".join(g.texts))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
