"""CLI command that extracts plain text from one document and prints it as JSON."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from docproof.config import ProofreadSettings
from docproof.extraction import build_default_extractor


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    parser = argparse.ArgumentParser(description="Extract text from a .docx, .xlsx, .txt or .csv file")
    parser.add_argument("--path", required=True, help="Document to extract")
    parser.add_argument(
        "--content-type",
        default=None,
        help="Declared MIME type or kind tag (default: decided by the file extension)",
    )
    args = parser.parse_args(argv)

    try:
        settings = ProofreadSettings.from_env()
    except ValueError as exc:
        print(json.dumps({"error": str(exc)}, ensure_ascii=False, indent=2))
        return 2

    source = Path(args.path)
    try:
        data = source.read_bytes()
    except OSError as exc:
        print(json.dumps({"path": str(source), "error": str(exc)}, ensure_ascii=False, indent=2))
        return 1

    extracted = build_default_extractor(settings).extract(data, args.content_type, source.name)
    print(json.dumps(extracted.to_dict(), ensure_ascii=False, indent=2))
    return 0 if extracted.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
