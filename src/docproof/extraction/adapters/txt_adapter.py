"""Plain and delimited text adapter with legacy-encoding fallback."""

from __future__ import annotations

import logging

from charset_normalizer import from_bytes

from docproof.errors import MalformedDocumentError
from docproof.extraction.models import ExtractedMetadata, ExtractedText
from docproof.kinds import CSV, TEXT

logger = logging.getLogger(__name__)


class TextAdapter:
    """Return text verbatim; UTF-8 first, detected encodings only for non-UTF-8 bytes."""

    def __init__(self, kind: str = TEXT, *, detect_legacy_encodings: bool = True) -> None:
        if kind not in {TEXT, CSV}:
            raise ValueError(f"TextAdapter cannot handle kind {kind!r}")
        self.kind = kind
        self._detect_legacy_encodings = detect_legacy_encodings

    def extract(self, data: bytes) -> ExtractedText:
        text = self._decode(data)
        return ExtractedText(text=text, metadata=ExtractedMetadata(character_count=len(text)))

    def _decode(self, raw: bytes) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            if not self._detect_legacy_encodings:
                raise MalformedDocumentError(f"Text is not valid UTF-8: {exc}") from exc

        encoding = self._detect_encoding(raw)
        logger.info("Decoded non-UTF-8 text using detected encoding %s", encoding)
        return raw.decode(encoding)

    def _detect_encoding(self, raw: bytes) -> str:
        best = from_bytes(raw).best()
        if best and best.encoding:
            return best.encoding

        for fallback in ("cp932", "euc_jp"):
            try:
                raw.decode(fallback)
                return fallback
            except UnicodeDecodeError:
                continue
        raise MalformedDocumentError("Could not detect text encoding")
