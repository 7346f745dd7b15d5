"""XLSX adapter rendering worksheets as tab/newline grids."""

from __future__ import annotations

import re

from lxml import etree

from docproof.errors import MalformedDocumentError
from docproof.extraction.models import ExtractedMetadata, ExtractedText
from docproof.kinds import SPREADSHEET
from docproof.package.container import PackageContainer
from docproof.package.xml import NS, parse_xml, qn

WORKBOOK_PART = "xl/workbook.xml"
SHARED_STRINGS_PART = "xl/sharedStrings.xml"
WORKSHEET_PREFIX = "xl/worksheets/sheet"

_CELL = qn("s:c")
_VALUE = qn("s:v")
_INLINE = qn("s:is")
_ITEM = qn("s:si")
_CELL_REF_RE = re.compile(r"^([A-Z]+)(\d+)$")
_SHEET_NUMBER_RE = re.compile(r"sheet(\d+)\.xml$")
# Text nodes of a string item, excluding phonetic (furigana) runs.
_VISIBLE_TEXT_XPATH = ".//s:t[not(ancestor::s:rPh)]"


def worksheet_parts(container: PackageContainer) -> list[str]:
    """Worksheet part names ordered by sheet number."""

    names = [name for name in container.names() if name.startswith(WORKSHEET_PREFIX) and name.endswith(".xml")]

    def sort_key(name: str) -> tuple[int, str]:
        match = _SHEET_NUMBER_RE.search(name)
        return (int(match.group(1)) if match else 1 << 30, name)

    return sorted(names, key=sort_key)


def visible_text_nodes(item: etree._Element) -> list[etree._Element]:
    """`t` elements of a shared or inline string item, in order."""

    return item.xpath(_VISIBLE_TEXT_XPATH, namespaces=NS)


def string_item_text(item: etree._Element) -> str:
    return "".join(node.text or "" for node in visible_text_nodes(item))


def parse_shared_strings(root: etree._Element | None) -> list[str]:
    """Decode the shared-string table into an ordered list of trimmed strings."""

    if root is None:
        return []
    return [string_item_text(item).strip() for item in root.iter(_ITEM)]


def column_sort_key(column_order: str):
    if column_order == "natural":
        return lambda letters: (len(letters), letters)
    return None


def render_worksheet(root: etree._Element, shared_strings: list[str], column_order: str = "lexical") -> str:
    """Render one worksheet: rows ascending, columns by the configured order, tab-joined."""

    rows: dict[int, dict[str, str]] = {}
    for cell in root.iter(_CELL):
        match = _CELL_REF_RE.match(cell.get("r", ""))
        if match is None:
            continue

        cell_type = cell.get("t", "")
        if cell_type == "inlineStr":
            inline = cell.find(_INLINE)
            value = string_item_text(inline) if inline is not None else ""
        else:
            value_node = cell.find(_VALUE)
            if value_node is None or not value_node.text:
                continue
            value = value_node.text
            if cell_type == "s":
                try:
                    index = int(value)
                except ValueError:
                    index = -1
                value = shared_strings[index] if 0 <= index < len(shared_strings) else ""

        column, row_number = match.group(1), int(match.group(2))
        rows.setdefault(row_number, {})[column] = value

    key = column_sort_key(column_order)
    lines: list[str] = []
    for row_number in sorted(rows):
        row = rows[row_number]
        values = [row[column] for column in sorted(row, key=key) if row[column]]
        if values:
            lines.append("\t".join(values))
    return "\n".join(lines)


class XlsxAdapter:
    """Extract every worksheet's cell values through the shared-string table."""

    kind = SPREADSHEET

    def __init__(self, *, column_order: str = "lexical", max_uncompressed_size: int | None = None) -> None:
        self._column_order = column_order
        self._max_uncompressed_size = max_uncompressed_size

    def extract(self, data: bytes) -> ExtractedText:
        container = PackageContainer.open(data, max_uncompressed_size=self._max_uncompressed_size)
        if not container.has_part(WORKBOOK_PART):
            raise MalformedDocumentError(f"Spreadsheet workbook is missing ({WORKBOOK_PART})")

        try:
            shared_root = (
                parse_xml(container.get_part_bytes(SHARED_STRINGS_PART))
                if container.has_part(SHARED_STRINGS_PART)
                else None
            )
            shared_strings = parse_shared_strings(shared_root)

            sheets = worksheet_parts(container)
            renderings = [
                render_worksheet(parse_xml(container.get_part_bytes(name)), shared_strings, self._column_order)
                for name in sheets
            ]
        except etree.XMLSyntaxError as exc:
            raise MalformedDocumentError(f"Spreadsheet part is not well-formed XML: {exc}") from exc

        text = "\n\n".join(rendering for rendering in renderings if rendering).strip()
        metadata = ExtractedMetadata(sheet_count=len(sheets), character_count=len(text))
        return ExtractedText(text=text, metadata=metadata)
