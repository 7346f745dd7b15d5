"""Extraction adapter implementations and contracts."""

from __future__ import annotations

from docproof.config import ProofreadSettings
from docproof.kinds import CSV, SPREADSHEET, TEXT, WORD_PROCESSING

from .base import ExtractionAdapter
from .docx_adapter import DocxAdapter
from .txt_adapter import TextAdapter
from .xlsx_adapter import XlsxAdapter


def build_default_adapters(settings: ProofreadSettings | None = None) -> dict[str, ExtractionAdapter]:
    """Return the adapter map keyed by content kind."""

    active = settings or ProofreadSettings()
    return {
        WORD_PROCESSING: DocxAdapter(max_uncompressed_size=active.max_uncompressed_bytes),
        SPREADSHEET: XlsxAdapter(
            column_order=active.column_order,
            max_uncompressed_size=active.max_uncompressed_bytes,
        ),
        TEXT: TextAdapter(TEXT, detect_legacy_encodings=active.detect_legacy_encodings),
        CSV: TextAdapter(CSV, detect_legacy_encodings=active.detect_legacy_encodings),
    }


__all__ = [
    "DocxAdapter",
    "ExtractionAdapter",
    "TextAdapter",
    "XlsxAdapter",
    "build_default_adapters",
]
