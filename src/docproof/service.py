"""Request-level wiring of extraction, proofreading and regeneration."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Iterable, Mapping

from docproof.config import ProofreadSettings
from docproof.deadline import Deadline
from docproof.errors import DocproofError
from docproof.extraction import ExtractedDocument, TextExtractor, build_default_extractor
from docproof.reconcile import PatchResult, Reconciler
from docproof.rules import Change, ProofreadResult, RuleEngine

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProofreadResponse:
    success: bool
    result: ProofreadResult | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success}
        if self.result is not None:
            payload["result"] = self.result.to_dict()
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(slots=True)
class CorrectionOutcome:
    """Every stage of one correction request; later stages are None when an earlier one failed."""

    extracted: ExtractedDocument
    proofread: ProofreadResponse | None = None
    patch: PatchResult | None = None

    @property
    def success(self) -> bool:
        return self.patch is not None and self.patch.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "extracted": self.extracted.to_dict(),
            "proofread": self.proofread.to_dict() if self.proofread is not None else None,
            "patch": self.patch.to_dict() if self.patch is not None else None,
        }


class CorrectionService:
    """Shared entry point for one engine and its collaborators.

    The service keeps no per-request state; a Deadline is created for each
    call from `settings.timeout_seconds` unless the caller passes one.
    """

    def __init__(
        self,
        settings: ProofreadSettings,
        engine: RuleEngine,
        extractor: TextExtractor | None = None,
        reconciler: Reconciler | None = None,
    ) -> None:
        self._settings = settings
        self._engine = engine
        self._extractor = extractor or build_default_extractor(settings)
        self._reconciler = reconciler or Reconciler(
            compression_level=settings.compression_level,
            max_uncompressed_size=settings.max_uncompressed_bytes,
            fallback_layout=settings.fallback_layout,
        )

    @classmethod
    def from_settings(cls, settings: ProofreadSettings | None = None) -> "CorrectionService":
        active = settings or ProofreadSettings()
        return cls(active, RuleEngine.from_path(active.rules_path))

    @property
    def settings(self) -> ProofreadSettings:
        return self._settings

    @property
    def engine(self) -> RuleEngine:
        return self._engine

    def new_deadline(self) -> Deadline:
        return Deadline.after(self._settings.timeout_seconds)

    def extract(self, data: bytes, declared_kind: str | None, file_name: str = "") -> ExtractedDocument:
        return self._extractor.extract(data, declared_kind, file_name)

    def proofread(self, text: str, *, deadline: Deadline | None = None) -> ProofreadResponse:
        active = deadline or self.new_deadline()
        try:
            result = self._engine.proofread(text, deadline=active)
        except DocproofError as exc:
            logger.warning("Proofreading failed for %s characters: %s", len(text), exc)
            return ProofreadResponse(success=False, error=str(exc))
        return ProofreadResponse(success=True, result=result)

    def regenerate(
        self,
        original: bytes | None,
        original_text: str,
        corrected_text: str,
        changes: Iterable[Change | Mapping[str, Any]],
        kind: str | None,
        *,
        deadline: Deadline | None = None,
    ) -> PatchResult:
        return self._reconciler.patch(
            original,
            original_text,
            corrected_text,
            changes,
            kind,
            deadline=deadline or self.new_deadline(),
        )

    def correct(self, data: bytes, declared_kind: str | None, file_name: str = "") -> CorrectionOutcome:
        """Extract, proofread and regenerate one upload under a single deadline."""

        deadline = self.new_deadline()
        extracted = self.extract(data, declared_kind, file_name)
        if not extracted.success:
            return CorrectionOutcome(extracted=extracted)

        proofread = self.proofread(extracted.text, deadline=deadline)
        if not proofread.success or proofread.result is None:
            return CorrectionOutcome(extracted=extracted, proofread=proofread)

        result = proofread.result
        patch = self.regenerate(
            data,
            result.original_text,
            result.corrected_text,
            result.changes,
            extracted.kind,
            deadline=deadline,
        )
        logger.info(
            "Correction finished for %s: changes=%s, success=%s, strategy=%s",
            file_name or "<buffer>",
            result.total_changes,
            patch.success,
            patch.strategy,
        )
        return CorrectionOutcome(extracted=extracted, proofread=proofread, patch=patch)
