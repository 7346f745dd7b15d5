"""Shared adapter contract for per-kind text extractors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from docproof.extraction.models import ExtractedText


@runtime_checkable
class ExtractionAdapter(Protocol):
    """Protocol that every format adapter must implement."""

    kind: str

    def extract(self, data: bytes) -> ExtractedText:
        """Render the payload's visible text as one flat string with metadata."""
