from __future__ import annotations

import json
from pathlib import Path

import pytest

from docproof.config import DEFAULT_RULES_PATH
from docproof.errors import RuleLoadError
from docproof.rules import Rule, load_rules


def test_load_rules_keeps_table_order_and_fields(write_rules) -> None:
    path = write_rules(
        [
            {"incorrect": ["下さい"], "correct": "ください", "category": "kana", "note": "hiragana", "id": "r1"},
            {"incorrect": ["出来る", "出来る", ""], "correct": "できる", "category": "kana"},
        ]
    )

    rules = load_rules(path)

    assert [rule.correct_form for rule in rules] == ["ください", "できる"]
    assert rules[0].note == "hiragana"
    assert rules[0].rule_id == "r1"
    assert rules[1].incorrect_forms == ("出来る",)


def test_rule_drops_forms_equal_to_correct_form() -> None:
    rule = Rule(incorrect_forms=("です", "ですた"), correct_form="です")

    assert rule.incorrect_forms == ("ですた",)


def test_bundled_rule_table_loads() -> None:
    rules = load_rules(DEFAULT_RULES_PATH)

    assert rules
    assert all(rule.incorrect_forms for rule in rules)


def test_missing_file_raises_rule_load_error(tmp_path: Path) -> None:
    with pytest.raises(RuleLoadError, match="Failed to read"):
        load_rules(tmp_path / "absent.json")


def test_invalid_json_raises_rule_load_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(RuleLoadError, match="not valid JSON"):
        load_rules(path)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"rules": "nope"},
        {"rules": [{"incorrect": "下さい", "correct": "ください"}]},
        {"rules": [{"incorrect": ["下さい"]}]},
        {"rules": ["just a string"]},
    ],
)
def test_malformed_table_shape_raises_rule_load_error(tmp_path: Path, payload: object) -> None:
    path = tmp_path / "shape.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(RuleLoadError):
        load_rules(path)
