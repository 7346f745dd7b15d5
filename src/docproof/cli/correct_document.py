"""CLI command that corrects a document end to end and writes the regenerated file."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from docproof.config import ProofreadSettings
from docproof.rules import RuleEngine
from docproof.service import CorrectionService


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    parser = argparse.ArgumentParser(description="Proofread a document and write the corrected copy")
    parser.add_argument("--path", required=True, help="Document to correct")
    parser.add_argument("--output", required=True, help="Where to write the regenerated document")
    parser.add_argument(
        "--content-type",
        default=None,
        help="Declared MIME type or kind tag (default: decided by the file extension)",
    )
    parser.add_argument("--rules", default=None, help="Rule table JSON (default: DOCPROOF_RULES_PATH)")
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

    engine = RuleEngine.from_path(args.rules or settings.rules_path)
    service = CorrectionService(settings, engine)
    outcome = service.correct(data, args.content_type, source.name)

    payload = outcome.to_dict()
    payload["output"] = None
    if outcome.success and outcome.patch is not None and outcome.patch.content is not None:
        output = Path(args.output)
        output.write_bytes(outcome.patch.content)
        payload["output"] = str(output)

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if outcome.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
