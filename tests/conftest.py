"""Shared builders for hand-written OOXML packages and rule tables."""

from __future__ import annotations

from io import BytesIO
import json
from pathlib import Path
from typing import Callable
from xml.sax.saxutils import escape
from zipfile import ZIP_DEFLATED, ZipFile

import pytest

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
S_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

_XML_HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

_DOCX_CONTENT_TYPES = (
    _XML_HEADER
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)

_XLSX_CONTENT_TYPES = (
    _XML_HEADER
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/xl/workbook.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"/>'
    "</Types>"
)

_DOCX_ROOT_RELS = (
    _XML_HEADER
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="word/document.xml"/>'
    "</Relationships>"
)

_STYLES = _XML_HEADER + f'<w:styles xmlns:w="{W_NS}"><w:docDefaults/></w:styles>'


def build_zip(parts: dict[str, str | bytes]) -> bytes:
    buffer = BytesIO()
    with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
        for name, content in parts.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def run_paragraph(*runs: str) -> str:
    """A `w:p` with one `w:r`/`w:t` per argument."""

    body = "".join(f'<w:r><w:t xml:space="preserve">{escape(text)}</w:t></w:r>' for text in runs)
    return f"<w:p>{body}</w:p>"


def table(rows: list[list[str]]) -> str:
    xml_rows = []
    for row in rows:
        cells = "".join(f"<w:tc>{run_paragraph(value)}</w:tc>" for value in row)
        xml_rows.append(f"<w:tr>{cells}</w:tr>")
    return f"<w:tbl>{''.join(xml_rows)}</w:tbl>"


def build_docx(body_xml: str, *, include_document: bool = True) -> bytes:
    parts: dict[str, str | bytes] = {
        "[Content_Types].xml": _DOCX_CONTENT_TYPES,
        "_rels/.rels": _DOCX_ROOT_RELS,
        "word/styles.xml": _STYLES,
    }
    if include_document:
        parts["word/document.xml"] = (
            _XML_HEADER + f'<w:document xmlns:w="{W_NS}"><w:body>{body_xml}<w:sectPr/></w:body></w:document>'
        )
    return build_zip(parts)


def shared_strings_xml(items: list[str]) -> str:
    """Shared-string table; plain strings become `<si><t>`, strings starting with `<` are used as raw `si` XML."""

    entries = "".join(item if item.startswith("<") else f"<si><t>{escape(item)}</t></si>" for item in items)
    return _XML_HEADER + f'<sst xmlns="{S_NS}" count="{len(items)}" uniqueCount="{len(items)}">{entries}</sst>'


def worksheet_xml(sheet_data: str) -> str:
    return _XML_HEADER + f'<worksheet xmlns="{S_NS}"><sheetData>{sheet_data}</sheetData></worksheet>'


def build_xlsx(sheets: list[str], shared_strings: list[str] | None = None, *, include_workbook: bool = True) -> bytes:
    """Package `sheetData` bodies as sheet1..N with an optional shared-string table."""

    parts: dict[str, str | bytes] = {"[Content_Types].xml": _XLSX_CONTENT_TYPES}
    if include_workbook:
        sheet_entries = "".join(
            f'<sheet name="Sheet{index}" sheetId="{index}" r:id="rId{index}"/>'
            for index in range(1, len(sheets) + 1)
        )
        parts["xl/workbook.xml"] = (
            _XML_HEADER + f'<workbook xmlns="{S_NS}" xmlns:r="{R_NS}"><sheets>{sheet_entries}</sheets></workbook>'
        )
    if shared_strings is not None:
        parts["xl/sharedStrings.xml"] = shared_strings_xml(shared_strings)
    for index, sheet_data in enumerate(sheets, start=1):
        parts[f"xl/worksheets/sheet{index}.xml"] = worksheet_xml(sheet_data)
    return build_zip(parts)


def read_part(data: bytes, name: str) -> bytes:
    with ZipFile(BytesIO(data)) as archive:
        return archive.read(name)


def corrupt_part(data: bytes, name: str) -> bytes:
    """Flip bytes in the middle of one entry's compressed stream, leaving the directory intact."""

    with ZipFile(BytesIO(data)) as archive:
        info = archive.getinfo(name)
    offset = info.header_offset
    name_length = int.from_bytes(data[offset + 26 : offset + 28], "little")
    extra_length = int.from_bytes(data[offset + 28 : offset + 30], "little")
    data_start = offset + 30 + name_length + extra_length
    start = data_start + info.compress_size // 4
    damaged = bytearray(data)
    for index in range(start, min(start + 8, data_start + info.compress_size)):
        damaged[index] ^= 0xFF
    return bytes(damaged)


@pytest.fixture
def make_docx() -> Callable[..., bytes]:
    return build_docx


@pytest.fixture
def make_xlsx() -> Callable[..., bytes]:
    return build_xlsx


@pytest.fixture
def paragraph() -> Callable[..., str]:
    return run_paragraph


@pytest.fixture
def docx_table() -> Callable[[list[list[str]]], str]:
    return table


@pytest.fixture
def part_of() -> Callable[[bytes, str], bytes]:
    return read_part


@pytest.fixture
def damage_part() -> Callable[[bytes, str], bytes]:
    return corrupt_part


@pytest.fixture
def write_rules(tmp_path: Path) -> Callable[[list[dict[str, object]]], Path]:
    def _write(rules: list[dict[str, object]]) -> Path:
        target = tmp_path / "rules.json"
        target.write_text(json.dumps({"rules": rules}, ensure_ascii=False), encoding="utf-8")
        return target

    return _write
