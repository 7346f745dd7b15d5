"""Change-ledger helpers shared by the package patchers."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from docproof.rules.models import Change


def _pair_of(change: Change | Mapping[str, Any]) -> tuple[str, str]:
    if isinstance(change, Change):
        return change.original, change.corrected
    original = change.get("original")
    corrected = change.get("corrected")
    return (
        original if isinstance(original, str) else "",
        corrected if isinstance(corrected, str) else "",
    )


def ledger_pairs(changes: Iterable[Change | Mapping[str, Any]]) -> list[tuple[str, str]]:
    """Collapse a ledger into unique original -> corrected pairs.

    The last corrected value seen for an original wins while the pair keeps
    the position of its first appearance. Empty and identity pairs are
    dropped.
    """

    pairs: dict[str, str] = {}
    for change in changes:
        original, corrected = _pair_of(change)
        if not original:
            continue
        pairs[original] = corrected
    return [(original, corrected) for original, corrected in pairs.items() if original != corrected]


def apply_pairs(text: str, pairs: Sequence[tuple[str, str]]) -> str:
    for original, corrected in pairs:
        if original in text:
            text = text.replace(original, corrected)
    return text


def distribute(lengths: Sequence[int], corrected: str) -> list[str]:
    """Hand out consecutive slices of `corrected`, one per slot of the given length.

    Whatever is left after the last slot is appended to it, so the pieces
    always concatenate back to `corrected`.
    """

    if not lengths:
        return []

    pieces: list[str] = []
    cursor = 0
    for length in lengths:
        pieces.append(corrected[cursor : cursor + length])
        cursor = min(cursor + length, len(corrected))
    if cursor < len(corrected):
        pieces[-1] += corrected[cursor:]
    return pieces
