"""Proofreading rule table and engine."""

from __future__ import annotations

from .engine import RuleEngine
from .loader import load_rules, parse_rules
from .models import Change, Position, ProofreadResult, Rule

__all__ = [
    "Change",
    "Position",
    "ProofreadResult",
    "Rule",
    "RuleEngine",
    "load_rules",
    "parse_rules",
]
