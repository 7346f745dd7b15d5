"""Load the ordered rule table from its JSON configuration source."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from docproof.errors import RuleLoadError
from docproof.rules.models import Rule

logger = logging.getLogger(__name__)


def _parse_rule(raw: Any, index: int) -> Rule:
    if not isinstance(raw, dict):
        raise RuleLoadError(f"Rule #{index} is not an object")

    incorrect = raw.get("incorrect")
    correct = raw.get("correct")
    if not isinstance(incorrect, list) or not all(isinstance(form, str) for form in incorrect):
        raise RuleLoadError(f"Rule #{index} must list its incorrect forms as strings")
    if not isinstance(correct, str):
        raise RuleLoadError(f"Rule #{index} must have a string correct form")

    note = raw.get("note")
    rule_id = raw.get("id")
    return Rule(
        incorrect_forms=tuple(incorrect),
        correct_form=correct,
        category=str(raw.get("category") or ""),
        note=str(note) if note is not None else None,
        rule_id=str(rule_id) if rule_id is not None else None,
    )


def parse_rules(payload: Any) -> tuple[Rule, ...]:
    """Validate a decoded `{"rules": [...]}` document and build Rules in table order."""

    if not isinstance(payload, dict) or not isinstance(payload.get("rules"), list):
        raise RuleLoadError("Rule table must be an object with a 'rules' array")
    return tuple(_parse_rule(raw, index) for index, raw in enumerate(payload["rules"], start=1))


def load_rules(path: str | Path) -> tuple[Rule, ...]:
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuleLoadError(f"Failed to read rule table {source}: {exc}") from exc
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RuleLoadError(f"Rule table {source} is not valid JSON: {exc}") from exc

    rules = parse_rules(payload)
    logger.info("Loaded %s proofreading rules from %s", len(rules), source)
    return rules
