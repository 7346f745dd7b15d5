"""Regeneration of corrected documents."""

from __future__ import annotations

from .docx_patcher import patch_docx
from .ledger import apply_pairs, distribute, ledger_pairs
from .models import PatchResult, STRATEGY_EXACT_MATCH, STRATEGY_LEDGER, STRATEGY_PLAIN, STRATEGY_SPREADSHEET
from .plain_renderer import PlainRenderer
from .reconciler import Reconciler
from .xlsx_patcher import patch_xlsx

__all__ = [
    "PatchResult",
    "PlainRenderer",
    "Reconciler",
    "STRATEGY_EXACT_MATCH",
    "STRATEGY_LEDGER",
    "STRATEGY_PLAIN",
    "STRATEGY_SPREADSHEET",
    "apply_pairs",
    "distribute",
    "ledger_pairs",
    "patch_docx",
    "patch_xlsx",
]
