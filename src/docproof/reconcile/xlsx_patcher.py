"""Apply ledger substitutions to the string-valued cells of a spreadsheet package."""

from __future__ import annotations

import logging
from typing import Sequence

from lxml import etree

from docproof.deadline import Deadline, check_deadline
from docproof.errors import PackagePatchError
from docproof.extraction.adapters.xlsx_adapter import (
    SHARED_STRINGS_PART,
    WORKBOOK_PART,
    visible_text_nodes,
    worksheet_parts,
)
from docproof.package.container import PackageContainer
from docproof.package.xml import parse_xml, qn, serialize_xml, set_element_text
from docproof.reconcile.ledger import apply_pairs, distribute

logger = logging.getLogger(__name__)

_CELL = qn("s:c")
_VALUE = qn("s:v")
_INLINE = qn("s:is")
_ITEM = qn("s:si")


def _parse_part(container: PackageContainer, name: str) -> etree._Element:
    try:
        return parse_xml(container.get_part_bytes(name))
    except etree.XMLSyntaxError as exc:
        raise PackagePatchError(f"{name} is not well-formed XML: {exc}") from exc


def patch_string_item(item: etree._Element, pairs: Sequence[tuple[str, str]]) -> bool:
    """Patch one `si`/`is` string item; rich-text runs share the result by length."""

    nodes = visible_text_nodes(item)
    if not nodes:
        return False

    current = [node.text or "" for node in nodes]
    full = "".join(current)
    corrected = apply_pairs(full, pairs)
    if corrected == full:
        return False

    updated = [corrected] if len(nodes) == 1 else distribute([len(text) for text in current], corrected)
    for node, before, after in zip(nodes, current, updated):
        if after != before:
            set_element_text(node, after)
    return True


def _patch_shared_strings(container: PackageContainer, pairs: Sequence[tuple[str, str]]) -> int:
    root = _parse_part(container, SHARED_STRINGS_PART)
    rewritten = sum(1 for item in root.iter(_ITEM) if patch_string_item(item, pairs))
    if rewritten:
        container.set_part(SHARED_STRINGS_PART, serialize_xml(root))
    return rewritten


def _patch_worksheet(container: PackageContainer, name: str, pairs: Sequence[tuple[str, str]]) -> int:
    root = _parse_part(container, name)
    rewritten = 0
    for cell in root.iter(_CELL):
        cell_type = cell.get("t")
        if cell_type == "inlineStr":
            inline = cell.find(_INLINE)
            if inline is not None and patch_string_item(inline, pairs):
                rewritten += 1
        elif cell_type == "str":
            # Cached result of a formula; the formula itself is left alone.
            value = cell.find(_VALUE)
            if value is None or not value.text:
                continue
            corrected = apply_pairs(value.text, pairs)
            if corrected != value.text:
                set_element_text(value, corrected)
                rewritten += 1
    if rewritten:
        container.set_part(name, serialize_xml(root))
    return rewritten


def patch_xlsx(
    container: PackageContainer,
    pairs: Sequence[tuple[str, str]],
    deadline: Deadline | None = None,
) -> int:
    """Rewrite matching strings in place and return how many were changed.

    Shared strings are patched once in the shared-string table, so every
    cell that references an entry sees the change. Numeric, boolean, date
    and error cells are never read.
    """

    if not container.has_part(WORKBOOK_PART):
        raise PackagePatchError(f"Spreadsheet package is missing {WORKBOOK_PART}")
    if not pairs:
        return 0

    rewritten = 0
    if container.has_part(SHARED_STRINGS_PART):
        check_deadline(deadline, "spreadsheet reconciliation")
        rewritten += _patch_shared_strings(container, pairs)

    for name in worksheet_parts(container):
        check_deadline(deadline, "spreadsheet reconciliation")
        rewritten += _patch_worksheet(container, name, pairs)

    logger.info("Patched %s spreadsheet strings", rewritten)
    return rewritten
