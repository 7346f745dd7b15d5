"""Extraction package interfaces."""

from __future__ import annotations

from docproof.config import ProofreadSettings

from .adapters import build_default_adapters
from .extractor import TextExtractor
from .models import ExtractedDocument, ExtractedMetadata, ExtractedText


def build_default_extractor(settings: ProofreadSettings | None = None) -> TextExtractor:
    """TextExtractor with every default adapter registered."""

    active = settings or ProofreadSettings()
    extractor = TextExtractor(max_file_bytes=active.max_file_bytes)
    for kind, adapter in build_default_adapters(active).items():
        extractor.register_adapter(kind, adapter)
    return extractor


__all__ = [
    "ExtractedDocument",
    "ExtractedMetadata",
    "ExtractedText",
    "TextExtractor",
    "build_default_extractor",
]
