"""Write corrected text back into the text runs of a word-processing package."""

from __future__ import annotations

import logging
from typing import Sequence

from lxml import etree

from docproof.deadline import Deadline, check_deadline
from docproof.errors import PackagePatchError
from docproof.extraction.adapters.docx_adapter import DOCUMENT_PART
from docproof.package.container import PackageContainer
from docproof.package.xml import parse_xml, qn, serialize_xml, set_element_text
from docproof.reconcile.ledger import apply_pairs, distribute
from docproof.reconcile.models import STRATEGY_EXACT_MATCH, STRATEGY_LEDGER

logger = logging.getLogger(__name__)

_T = qn("w:t")


def patch_docx(
    container: PackageContainer,
    original_text: str,
    corrected_text: str,
    pairs: Sequence[tuple[str, str]],
    deadline: Deadline | None = None,
) -> str:
    """Rewrite `w:t` elements of the body part in place and return the strategy used.

    When the runs concatenate to the caller's original text, the corrected
    text is sliced across them by their original lengths. Otherwise each run
    gets the ledger pairs applied on its own, so a change spanning two runs
    is left as it was.
    """

    if not container.has_part(DOCUMENT_PART):
        raise PackagePatchError(f"Word-processing package is missing {DOCUMENT_PART}")

    check_deadline(deadline, "word-processing reconciliation")
    try:
        root = parse_xml(container.get_part_bytes(DOCUMENT_PART))
    except etree.XMLSyntaxError as exc:
        raise PackagePatchError(f"{DOCUMENT_PART} is not well-formed XML: {exc}") from exc

    nodes = list(root.iter(_T))
    current = [node.text or "" for node in nodes]

    exact_match = "".join(current).strip() == original_text.strip()
    if not nodes and exact_match and corrected_text.strip():
        raise PackagePatchError("Document has no text runs to receive the corrected text")

    if exact_match:
        strategy = STRATEGY_EXACT_MATCH
        updated = distribute([len(text) for text in current], corrected_text)
    else:
        strategy = STRATEGY_LEDGER
        updated = [apply_pairs(text, pairs) for text in current]

    rewritten = 0
    for node, before, after in zip(nodes, current, updated):
        if after != before:
            set_element_text(node, after)
            rewritten += 1

    if rewritten:
        check_deadline(deadline, "word-processing reconciliation")
        container.set_part(DOCUMENT_PART, serialize_xml(root))

    logger.info("Patched %s of %s text runs (strategy=%s)", rewritten, len(nodes), strategy)
    return strategy
