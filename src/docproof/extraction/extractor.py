"""Routing entrypoint that turns uploaded bytes into an ExtractedDocument."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from docproof.config import DEFAULT_MAX_FILE_BYTES
from docproof.errors import DocproofError, SizeLimitError, UnsupportedFormatError
from docproof.extraction.adapters.base import ExtractionAdapter
from docproof.extraction.models import ExtractedDocument, ExtractedMetadata
from docproof.kinds import resolve_kind

logger = logging.getLogger(__name__)


def _format_limit(limit_bytes: int) -> str:
    mebibytes = limit_bytes / (1024 * 1024)
    return f"{mebibytes:g} MiB"


class TextExtractor:
    """Resolve the adapter for a declared kind and return a structured result."""

    def __init__(self, *, max_file_bytes: int = DEFAULT_MAX_FILE_BYTES) -> None:
        if max_file_bytes < 1:
            raise ValueError("max_file_bytes must be >= 1")
        self._max_file_bytes = max_file_bytes
        self._adapter_map: dict[str, ExtractionAdapter] = {}

    @property
    def adapter_map(self) -> dict[str, ExtractionAdapter]:
        """Registered adapters keyed by content kind."""

        return dict(self._adapter_map)

    @property
    def max_file_bytes(self) -> int:
        return self._max_file_bytes

    def register_adapter(self, kind: str, adapter: ExtractionAdapter) -> None:
        if not kind:
            raise ValueError("Adapter kind cannot be empty")
        self._adapter_map[kind] = adapter

    def extract(self, data: bytes, declared_kind: str | None, file_name: str = "") -> ExtractedDocument:
        """Extract text without raising; failures come back with success=False."""

        file_size = len(data)
        extracted_at = datetime.now(timezone.utc).isoformat()
        file_type = declared_kind or ""

        try:
            kind, extracted = self._extract(data, declared_kind, file_name)
        except DocproofError as exc:
            logger.warning("Extraction failed for %s (%s): %s", file_name or "<buffer>", file_type, exc)
            return ExtractedDocument(
                text="",
                file_name=file_name,
                file_type=file_type,
                file_size=file_size,
                extracted_at=extracted_at,
                metadata=ExtractedMetadata(),
                success=False,
                error=str(exc),
            )
        except Exception as exc:
            logger.exception("Unexpected extraction failure for %s", file_name or "<buffer>")
            return ExtractedDocument(
                text="",
                file_name=file_name,
                file_type=file_type,
                file_size=file_size,
                extracted_at=extracted_at,
                metadata=ExtractedMetadata(),
                success=False,
                error=f"Adapter extraction failed: {exc}",
            )

        logger.info(
            "Extracted %s characters from %s (kind=%s, bytes=%s)",
            len(extracted.text),
            file_name or "<buffer>",
            kind,
            file_size,
        )
        return ExtractedDocument(
            text=extracted.text,
            file_name=file_name,
            file_type=file_type,
            file_size=file_size,
            extracted_at=extracted_at,
            metadata=extracted.metadata,
            kind=kind,
        )

    def _extract(self, data: bytes, declared_kind: str | None, file_name: str):
        if len(data) > self._max_file_bytes:
            raise SizeLimitError(
                f"File size {len(data)} bytes exceeds the {_format_limit(self._max_file_bytes)} limit"
            )

        kind = resolve_kind(declared_kind, file_name)
        adapter = self._adapter_map.get(kind)
        if adapter is None:
            raise UnsupportedFormatError(f"No adapter registered for kind {kind!r}")
        return kind, adapter.extract(data)
