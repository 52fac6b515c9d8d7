from __future__ import annotations

import argparse
import json
from pathlib import Path

from .artifacts import write_recognition_json_artifact
from .contracts import RecognizerConfig, RecognizerEngineName
from .module import recognize_image_file


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="td-ocr",
        description="Text recognition: image -> blocks/lines/elements JSON (pixel coordinates).",
    )
    p.add_argument("--image", required=True, type=Path, help="Input image file.")
    p.add_argument("--output", required=True, type=Path, help="Output recognition JSON file.")
    p.add_argument(
        "--engine",
        choices=[e.value for e in RecognizerEngineName],
        default=RecognizerEngineName.TESSERACT_CLI.value,
    )
    p.add_argument("--lang", default="eng", help="Tesseract language hint.")
    p.add_argument("--psm", type=int, default=None, help="Tesseract page segmentation mode.")
    p.add_argument("--timeout-s", type=float, default=30.0)
    p.add_argument("--confidence-floor", type=float, default=0.0)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    config = RecognizerConfig(
        engine=RecognizerEngineName(args.engine),
        language=args.lang,
        psm=args.psm,
        timeout_s=args.timeout_s,
        confidence_floor=args.confidence_floor,
    )

    result = recognize_image_file(config=config, image_file=args.image)
    write_recognition_json_artifact(result=result, out_file=args.output)

    print(
        json.dumps(
            {
                "ok": result.ok,
                "blocks": len(result.blocks),
                "lines": len(result.lines()),
                "errors": [e.code for e in result.errors],
            },
            sort_keys=True,
            separators=(",", ":"),
        )
    )
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
