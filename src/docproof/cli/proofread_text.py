"""CLI command that runs the rule table over text and prints the change ledger."""

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
    parser = argparse.ArgumentParser(description="Proofread text with the configured rule table")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Text to proofread")
    source.add_argument("--path", help="UTF-8 text file to proofread")
    parser.add_argument("--rules", default=None, help="Rule table JSON (default: DOCPROOF_RULES_PATH)")
    args = parser.parse_args(argv)

    try:
        settings = ProofreadSettings.from_env()
    except ValueError as exc:
        print(json.dumps({"error": str(exc)}, ensure_ascii=False, indent=2))
        return 2

    if args.path is not None:
        try:
            text = Path(args.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(json.dumps({"path": args.path, "error": str(exc)}, ensure_ascii=False, indent=2))
            return 1
    else:
        text = args.text

    engine = RuleEngine.from_path(args.rules or settings.rules_path)
    service = CorrectionService(settings, engine)
    response = service.proofread(text)

    payload = response.to_dict()
    payload["rules"] = {
        "count": engine.rule_count,
        "byCategory": engine.rules_by_category(),
        "loadError": engine.load_error,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if response.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
