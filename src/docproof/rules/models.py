"""Rule, change ledger and proofreading result structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Rule:
    """One literal-substitution rule: any incorrect form becomes the correct form.

    Forms that are empty or equal to the correct form are dropped on
    construction, so a Rule never rewrites text into itself.
    """

    incorrect_forms: tuple[str, ...]
    correct_form: str
    category: str = ""
    note: str | None = None
    rule_id: str | None = None

    def __post_init__(self) -> None:
        forms: list[str] = []
        for form in self.incorrect_forms:
            if form and form != self.correct_form and form not in forms:
                forms.append(form)
        object.__setattr__(self, "incorrect_forms", tuple(forms))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "incorrect": list(self.incorrect_forms),
            "correct": self.correct_form,
            "category": self.category,
        }
        if self.note is not None:
            payload["note"] = self.note
        if self.rule_id is not None:
            payload["id"] = self.rule_id
        return payload


@dataclass(frozen=True, slots=True)
class Position:
    """Offsets into the working text as it stood when the rule ran."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Change:
    original: str
    corrected: str
    position: Position
    rule: Rule

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "corrected": self.corrected,
            "position": {"start": self.position.start, "end": self.position.end},
            "rule": self.rule.to_dict(),
        }


@dataclass(slots=True)
class ProofreadResult:
    original_text: str
    corrected_text: str
    changes: list[Change] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return len(self.changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalText": self.original_text,
            "correctedText": self.corrected_text,
            "changes": [change.to_dict() for change in self.changes],
            "totalChanges": self.total_changes,
        }
