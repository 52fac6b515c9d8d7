from __future__ import annotations

import argparse
import json
from pathlib import Path

from contracts.recognition import RecognitionResult

from .annotate import annotate_recognition
from .artifacts import write_annotation_json_artifact
from .config import ROW_PRECISION, ROW_TOLERANCE, RowClusteringConfig, parse_keywords_csv


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="td-rows",
        description="Row clustering: recognition JSON -> kept lines, row coordinates and row table.",
    )
    p.add_argument("--input", required=True, type=Path, help="Path to a recognition JSON artifact.")
    p.add_argument("--output", required=True, type=Path, help="Path to write the frame annotation JSON artifact.")
    p.add_argument(
        "--keywords",
        default=None,
        help='Comma separated relevance keywords, e.g. "calories,sugar". Default: nutrition label keywords.',
    )
    p.add_argument("--row-tolerance", type=float, default=ROW_TOLERANCE)
    p.add_argument("--row-precision", type=int, default=ROW_PRECISION)
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    raw = json.loads(args.input.read_text(encoding="utf-8"))
    recognition = RecognitionResult.from_dict(raw)

    cfg = RowClusteringConfig(
        keywords=parse_keywords_csv(args.keywords),
        row_tolerance=args.row_tolerance,
        row_precision=args.row_precision,
    )

    annotation = annotate_recognition(recognition, cfg)
    write_annotation_json_artifact(annotation=annotation, out_file=args.output)

    summary = {
        "ok": recognition.ok,
        "lines": len(annotation.lines),
        "kept": len(annotation.kept_lines()),
        "groups": len(annotation.groups),
        "skipped": annotation.meta.get("skipped"),
    }
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    return 0 if recognition.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
