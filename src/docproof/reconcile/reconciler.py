"""Regenerate a corrected document, preserving the original package where possible."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from docproof.config import DEFAULT_COMPRESSION_LEVEL
from docproof.deadline import Deadline
from docproof.errors import DocproofError
from docproof.kinds import DOCX_MEDIA_TYPE, MEDIA_TYPES, SPREADSHEET, WORD_PROCESSING
from docproof.package.container import PackageContainer
from docproof.reconcile.docx_patcher import patch_docx
from docproof.reconcile.ledger import ledger_pairs
from docproof.reconcile.models import STRATEGY_PLAIN, STRATEGY_SPREADSHEET, PatchResult
from docproof.reconcile.plain_renderer import PlainRenderer
from docproof.reconcile.xlsx_patcher import patch_xlsx
from docproof.rules.models import Change

logger = logging.getLogger(__name__)


class Reconciler:
    """Patch the text-bearing parts of an original package with corrected text.

    Word-processing and spreadsheet packages are rewritten on a copy of the
    opened container, leaving styles, relationships and media untouched.
    Anything else, or a request without original bytes, falls back to a
    freshly rendered document.
    """

    def __init__(
        self,
        *,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        max_uncompressed_size: int | None = None,
        fallback_layout: str = "paragraphs",
    ) -> None:
        if not 0 <= compression_level <= 9:
            raise ValueError("compression_level must be between 0 and 9")
        self._compression_level = compression_level
        self._max_uncompressed_size = max_uncompressed_size
        self._renderer = PlainRenderer(fallback_layout)

    def patch(
        self,
        original: bytes | None,
        original_text: str,
        corrected_text: str,
        changes: Iterable[Change | Mapping[str, Any]],
        kind: str | None,
        *,
        deadline: Deadline | None = None,
    ) -> PatchResult:
        """Return the regenerated document; failures come back with success=False."""

        target_kind = kind if kind in (WORD_PROCESSING, SPREADSHEET) and original else WORD_PROCESSING
        media_type = MEDIA_TYPES[target_kind]

        try:
            if not original or kind not in (WORD_PROCESSING, SPREADSHEET):
                content = self._renderer.render(corrected_text)
                return PatchResult(
                    success=True,
                    kind=WORD_PROCESSING,
                    media_type=DOCX_MEDIA_TYPE,
                    strategy=STRATEGY_PLAIN,
                    content=content,
                )

            source = PackageContainer.open(original, max_uncompressed_size=self._max_uncompressed_size)
            container = source.copy()
            pairs = ledger_pairs(changes)

            if kind == WORD_PROCESSING:
                strategy = patch_docx(container, original_text, corrected_text, pairs, deadline)
            else:
                patch_xlsx(container, pairs, deadline)
                strategy = STRATEGY_SPREADSHEET

            content = container.serialize(self._compression_level)
        except DocproofError as exc:
            logger.warning("Regeneration failed (kind=%s): %s", kind, exc)
            return PatchResult(success=False, kind=target_kind, media_type=media_type, error=str(exc))

        logger.info(
            "Regenerated %s package: %s bytes in, %s bytes out (strategy=%s)",
            kind,
            len(original),
            len(content),
            strategy,
        )
        return PatchResult(
            success=True,
            kind=target_kind,
            media_type=media_type,
            strategy=strategy,
            content=content,
        )
