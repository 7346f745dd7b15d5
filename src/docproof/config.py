"""Runtime configuration for extraction, proofreading and regeneration."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping


DEFAULT_RULES_PATH = Path(__file__).resolve().parent / "rules" / "data" / "default_rules.json"
DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024
DEFAULT_EXPANSION_RATIO = 10
DEFAULT_COMPRESSION_LEVEL = 6
DEFAULT_TIMEOUT_SECONDS = 30.0
COLUMN_ORDERS = ("lexical", "natural")
FALLBACK_LAYOUTS = ("paragraphs", "structured")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    value = float(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_bool(*, name: str, raw_value: str) -> bool:
    lowered = raw_value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag")


def _parse_choice(*, name: str, raw_value: str, choices: tuple[str, ...]) -> str:
    if raw_value not in choices:
        raise ValueError(f"{name} must be one of: {', '.join(choices)}")
    return raw_value


@dataclass(frozen=True, slots=True)
class ProofreadSettings:
    """Validated settings shared by every stage of one correction request."""

    rules_path: Path = DEFAULT_RULES_PATH
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    max_uncompressed_bytes: int = DEFAULT_MAX_FILE_BYTES * DEFAULT_EXPANSION_RATIO
    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    column_order: str = "lexical"
    detect_legacy_encodings: bool = True
    fallback_layout: str = "paragraphs"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProofreadSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        rules_path_raw = source.get("DOCPROOF_RULES_PATH", str(DEFAULT_RULES_PATH)).strip()
        if not rules_path_raw:
            raise ValueError("DOCPROOF_RULES_PATH cannot be empty")

        max_file_raw = source.get("DOCPROOF_MAX_FILE_BYTES", str(DEFAULT_MAX_FILE_BYTES)).strip()
        if not max_file_raw:
            raise ValueError("DOCPROOF_MAX_FILE_BYTES cannot be empty")
        max_file_bytes = _parse_positive_int(name="DOCPROOF_MAX_FILE_BYTES", raw_value=max_file_raw)

        max_uncompressed_raw = source.get(
            "DOCPROOF_MAX_UNCOMPRESSED_BYTES",
            str(max_file_bytes * DEFAULT_EXPANSION_RATIO),
        ).strip()
        if not max_uncompressed_raw:
            raise ValueError("DOCPROOF_MAX_UNCOMPRESSED_BYTES cannot be empty")
        max_uncompressed_bytes = _parse_positive_int(
            name="DOCPROOF_MAX_UNCOMPRESSED_BYTES",
            raw_value=max_uncompressed_raw,
        )

        level_raw = source.get("DOCPROOF_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL)).strip()
        compression_level = _parse_positive_int(
            name="DOCPROOF_COMPRESSION_LEVEL",
            raw_value=level_raw or str(DEFAULT_COMPRESSION_LEVEL),
            minimum=0,
        )
        if compression_level > 9:
            raise ValueError("DOCPROOF_COMPRESSION_LEVEL must be <= 9")

        timeout_raw = source.get("DOCPROOF_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)).strip()
        if not timeout_raw:
            raise ValueError("DOCPROOF_TIMEOUT_SECONDS cannot be empty")
        timeout_seconds = _parse_positive_float(
            name="DOCPROOF_TIMEOUT_SECONDS",
            raw_value=timeout_raw,
            minimum=0.1,
        )

        column_order = _parse_choice(
            name="DOCPROOF_COLUMN_ORDER",
            raw_value=source.get("DOCPROOF_COLUMN_ORDER", "lexical").strip().lower(),
            choices=COLUMN_ORDERS,
        )
        detect_legacy_encodings = _parse_bool(
            name="DOCPROOF_DETECT_ENCODINGS",
            raw_value=source.get("DOCPROOF_DETECT_ENCODINGS", "true").strip(),
        )
        fallback_layout = _parse_choice(
            name="DOCPROOF_FALLBACK_LAYOUT",
            raw_value=source.get("DOCPROOF_FALLBACK_LAYOUT", "paragraphs").strip().lower(),
            choices=FALLBACK_LAYOUTS,
        )

        return cls(
            rules_path=Path(rules_path_raw),
            max_file_bytes=max_file_bytes,
            max_uncompressed_bytes=max_uncompressed_bytes,
            compression_level=compression_level,
            timeout_seconds=timeout_seconds,
            column_order=column_order,
            detect_legacy_encodings=detect_legacy_encodings,
            fallback_layout=fallback_layout,
        )
