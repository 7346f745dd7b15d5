"""Regeneration result structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

STRATEGY_EXACT_MATCH = "exact-match"
STRATEGY_LEDGER = "ledger"
STRATEGY_SPREADSHEET = "spreadsheet"
STRATEGY_PLAIN = "plain"


@dataclass(slots=True)
class PatchResult:
    """Outcome of one regeneration; `content` is only set on success."""

    success: bool
    kind: str
    media_type: str
    strategy: str | None = None
    content: bytes | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "kind": self.kind,
            "mediaType": self.media_type,
            "strategy": self.strategy,
            "size": len(self.content) if self.content is not None else 0,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload
