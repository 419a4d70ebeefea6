from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from passport_ocr.config import CONFIG
from passport_ocr.pipeline.ingest import load_image
from passport_ocr.pipeline.mrz_lines import MRZNotFoundError
from passport_ocr.pipeline.ocr import ocr_mrz_text
from passport_ocr.pipeline.passport import parse_mrz


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Decode a passport MRZ from OCR text or an image.")
    parser.add_argument("path", type=Path, help="OCR text file, or an image with --image")
    parser.add_argument("--image", action="store_true", help="run Tesseract on the file first")
    args = parser.parse_args(argv)

    if args.image:
        text = ocr_mrz_text(load_image(args.path), CONFIG.ocr)
    else:
        text = args.path.read_text()

    try:
        result = parse_mrz(text, CONFIG.mrz)
    except MRZNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    payload = {
        "data": result.record.model_dump(),
        "checks": result.checks.model_dump(),
        "lines": result.lines,
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
