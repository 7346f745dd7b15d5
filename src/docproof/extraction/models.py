"""Canonical extraction output shared by all format adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ExtractedMetadata:
    """Structural counts; fields that do not apply to a kind stay None."""

    table_count: int | None = None
    paragraph_count: int | None = None
    sheet_count: int | None = None
    character_count: int | None = None

    def to_dict(self) -> dict[str, int]:
        payload = {
            "tableCount": self.table_count,
            "paragraphCount": self.paragraph_count,
            "sheetCount": self.sheet_count,
            "characterCount": self.character_count,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass(slots=True)
class ExtractedText:
    """What an adapter returns: flat text plus its structural metadata."""

    text: str
    metadata: ExtractedMetadata = field(default_factory=ExtractedMetadata)


@dataclass(slots=True)
class ExtractedDocument:
    """Per-request extraction result; never persisted."""

    text: str
    file_name: str
    file_type: str
    file_size: int
    extracted_at: str
    metadata: ExtractedMetadata = field(default_factory=ExtractedMetadata)
    success: bool = True
    error: str | None = None
    kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "text": self.text,
            "fileName": self.file_name,
            "fileType": self.file_type,
            "fileSize": self.file_size,
            "extractedAt": self.extracted_at,
            "metadata": self.metadata.to_dict(),
            "success": self.success,
        }
        if self.kind is not None:
            payload["kind"] = self.kind
        if self.error is not None:
            payload["error"] = self.error
        return payload
