"""Content-kind tags and their resolution from MIME types and filenames."""

from __future__ import annotations

from pathlib import PurePath

from docproof.errors import UnsupportedFormatError

WORD_PROCESSING = "word-processing"
SPREADSHEET = "spreadsheet"
TEXT = "text"
CSV = "csv"

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MEDIA_TYPES: dict[str, str] = {
    WORD_PROCESSING: DOCX_MEDIA_TYPE,
    SPREADSHEET: XLSX_MEDIA_TYPE,
    TEXT: "text/plain",
    CSV: "text/csv",
}

_MIME_KINDS: dict[str, str] = {
    DOCX_MEDIA_TYPE: WORD_PROCESSING,
    XLSX_MEDIA_TYPE: SPREADSHEET,
    "text/plain": TEXT,
    "text/csv": CSV,
}

_EXTENSION_KINDS: dict[str, str] = {
    ".docx": WORD_PROCESSING,
    ".xlsx": SPREADSHEET,
    ".txt": TEXT,
    ".csv": CSV,
}

_KIND_TAGS = {WORD_PROCESSING, SPREADSHEET, TEXT, CSV}

GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "application/zip", "binary/octet-stream"}


def kind_from_extension(file_name: str) -> str | None:
    """Return the kind implied by a filename suffix, or None."""

    if not file_name:
        return None
    return _EXTENSION_KINDS.get(PurePath(file_name).suffix.lower())


def resolve_kind(declared_kind: str | None, file_name: str = "") -> str:
    """Map a declared MIME type or kind tag to a kind, falling back to the extension.

    Text kinds also match on extension alone, mirroring upload clients that
    send an unrelated MIME type for `.txt` and `.csv` files.
    """

    declared = (declared_kind or "").split(";", 1)[0].strip().lower()

    if declared in _KIND_TAGS:
        return declared
    if declared in _MIME_KINDS:
        return _MIME_KINDS[declared]

    by_extension = kind_from_extension(file_name)
    if declared in GENERIC_CONTENT_TYPES and by_extension is not None:
        return by_extension
    if by_extension in {TEXT, CSV}:
        return by_extension

    suffix = PurePath(file_name).suffix.lower() if file_name else ""
    raise UnsupportedFormatError(
        f"Unsupported file format: {declared_kind or 'unknown'} ({suffix or 'no extension'})"
    )
