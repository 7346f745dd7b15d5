"""DOCX adapter flattening prose and table grids in document order."""

from __future__ import annotations

from lxml import etree

from docproof.errors import MalformedDocumentError, PartMissingError
from docproof.extraction.models import ExtractedMetadata, ExtractedText
from docproof.extraction.normalization import normalize_whitespace, strip_tags
from docproof.kinds import WORD_PROCESSING
from docproof.package.container import PackageContainer
from docproof.package.xml import NS, parse_xml, qn

DOCUMENT_PART = "word/document.xml"

_TBL = qn("w:tbl")
_P = qn("w:p")
_ROW_XPATH = "./w:tr | ./w:sdt/w:sdtContent/w:tr"
_CELL_XPATH = "./w:tc | ./w:sdt/w:sdtContent/w:tc"


def render_table(table: etree._Element) -> str:
    """Render a table as newline-separated rows of tab-separated cells.

    Cell content is tag-stripped and whitespace-collapsed, so a nested table
    reads as plain text inside its cell.
    """

    rows: list[str] = []
    for row in table.xpath(_ROW_XPATH, namespaces=NS):
        cells = [strip_tags(cell) for cell in row.xpath(_CELL_XPATH, namespaces=NS)]
        if cells:
            rows.append("\t".join(cells))
    return "\n".join(rows)


def _flush_prose(pieces: list[str], segments: list[str]) -> None:
    prose = normalize_whitespace(" ".join(pieces))
    if prose:
        segments.append(prose)
    pieces.clear()


def _collect(element: etree._Element, pieces: list[str], segments: list[str]) -> None:
    if isinstance(element.tag, str) and element.text:
        pieces.append(element.text)
    for child in element:
        if child.tag == _TBL:
            _flush_prose(pieces, segments)
            table_text = render_table(child)
            if table_text:
                segments.append(table_text)
        else:
            _collect(child, pieces, segments)
        if child.tail:
            pieces.append(child.tail)


def flatten_document(root: etree._Element) -> str:
    """Interleave collapsed prose with rendered top-level tables, separated by blank lines."""

    pieces: list[str] = []
    segments: list[str] = []
    _collect(root, pieces, segments)
    _flush_prose(pieces, segments)
    return "\n\n".join(segments)


class DocxAdapter:
    """Extract the body text of a word-processing package."""

    kind = WORD_PROCESSING

    def __init__(self, *, max_uncompressed_size: int | None = None) -> None:
        self._max_uncompressed_size = max_uncompressed_size

    def extract(self, data: bytes) -> ExtractedText:
        container = PackageContainer.open(data, max_uncompressed_size=self._max_uncompressed_size)
        try:
            payload = container.get_part_bytes(DOCUMENT_PART)
        except PartMissingError as exc:
            raise MalformedDocumentError(f"Word document body is missing ({DOCUMENT_PART})") from exc

        try:
            root = parse_xml(payload)
        except etree.XMLSyntaxError as exc:
            raise MalformedDocumentError(f"Word document body is not well-formed XML: {exc}") from exc

        text = flatten_document(root)
        metadata = ExtractedMetadata(
            table_count=sum(1 for _ in root.iter(_TBL)),
            paragraph_count=sum(1 for _ in root.iter(_P)),
            character_count=len(text),
        )
        return ExtractedText(text=text, metadata=metadata)
