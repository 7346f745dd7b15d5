"""Table-driven literal-substitution proofreading."""

from __future__ import annotations

from collections import Counter
import logging
from pathlib import Path
from typing import Iterable

from docproof.deadline import Deadline, check_deadline
from docproof.errors import RuleLoadError
from docproof.rules.loader import load_rules
from docproof.rules.models import Change, Position, ProofreadResult, Rule

logger = logging.getLogger(__name__)


def find_occurrences(text: str, form: str) -> list[int]:
    """Start offsets of every non-overlapping occurrence, scanning left to right."""

    starts: list[int] = []
    index = text.find(form)
    while index != -1:
        starts.append(index)
        index = text.find(form, index + len(form))
    return starts


class RuleEngine:
    """Apply an immutable, ordered rule table to text.

    Build one engine at start-up and share it; `proofread` keeps all of its
    working state local to the call.
    """

    def __init__(self, rules: Iterable[Rule] = (), *, load_error: str | None = None) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._load_error = load_error

    @classmethod
    def from_path(cls, path: str | Path) -> "RuleEngine":
        """Load the rule table, degrading to an identity engine when it is unavailable."""

        try:
            rules = load_rules(path)
        except RuleLoadError as exc:
            logger.warning("Proofreading rules unavailable, continuing with zero rules: %s", exc)
            return cls((), load_error=str(exc))
        return cls(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def rule_count(self) -> int:
        return len(self._rules)

    @property
    def degraded(self) -> bool:
        return self._load_error is not None

    @property
    def load_error(self) -> str | None:
        return self._load_error

    def rules_by_category(self) -> dict[str, int]:
        return dict(Counter(rule.category for rule in self._rules))

    def proofread(self, text: str, *, deadline: Deadline | None = None) -> ProofreadResult:
        """Run every rule over the evolving working text.

        Each Change's position is measured against the working text as it was
        right before its rule ran, so offsets from different rules do not
        share a coordinate system. The returned ledger is ordered by
        descending start for presentation only.
        """

        working = text
        changes: list[Change] = []

        for rule in self._rules:
            check_deadline(deadline, "proofreading")
            for form in rule.incorrect_forms:
                starts = find_occurrences(working, form)
                if not starts:
                    continue
                for start in starts:
                    changes.append(
                        Change(
                            original=form,
                            corrected=rule.correct_form,
                            position=Position(start=start, end=start + len(form)),
                            rule=rule,
                        )
                    )
                working = working.replace(form, rule.correct_form)

        changes.sort(key=lambda change: change.position.start, reverse=True)

        logger.info(
            "Proofreading finished: original=%s chars, corrected=%s chars, changes=%s, rules=%s",
            len(text),
            len(working),
            len(changes),
            len(self._rules),
        )
        return ProofreadResult(original_text=text, corrected_text=working, changes=changes)
