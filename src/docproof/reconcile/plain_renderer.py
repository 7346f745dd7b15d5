"""Build a new minimal .docx when there is no original structure to patch."""

from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
import logging
import re

from docx import Document

from docproof.config import FALLBACK_LAYOUTS
from docproof.package.xml import sanitize_xml_string

logger = logging.getLogger(__name__)

_BLANK_LINE_RE = re.compile(r"\n\s*\n")


@dataclass(slots=True)
class Block:
    """A paragraph (`rows` empty) or a table of tab-separated rows."""

    text: str = ""
    rows: list[list[str]] = field(default_factory=list)

    @property
    def is_table(self) -> bool:
        return bool(self.rows)


def split_paragraphs(text: str) -> list[str]:
    return [chunk.strip() for chunk in _BLANK_LINE_RE.split(text) if chunk.strip()]


def split_structured(text: str) -> list[Block]:
    """Group consecutive tab-separated lines into tables; other lines become paragraphs.

    Blank lines are skipped and do not end a table.
    """

    blocks: list[Block] = []
    table: Block | None = None
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if "\t" in line:
            cells = [cell for cell in line.split("\t") if cell.strip()]
            if table is None:
                table = Block()
                blocks.append(table)
            table.rows.append(cells)
            continue
        table = None
        blocks.append(Block(text=line))
    return blocks


class PlainRenderer:
    """Render corrected text as a fresh word-processing document."""

    def __init__(self, layout: str = "paragraphs") -> None:
        if layout not in FALLBACK_LAYOUTS:
            raise ValueError(f"layout must be one of: {', '.join(FALLBACK_LAYOUTS)}")
        self._layout = layout

    @property
    def layout(self) -> str:
        return self._layout

    def render(self, text: str, layout: str | None = None) -> bytes:
        active = layout or self._layout
        if active not in FALLBACK_LAYOUTS:
            raise ValueError(f"layout must be one of: {', '.join(FALLBACK_LAYOUTS)}")

        text = sanitize_xml_string(text)
        document = Document()
        if active == "structured":
            blocks = split_structured(text)
        else:
            blocks = [Block(text=paragraph) for paragraph in split_paragraphs(text)]

        for block in blocks:
            if not block.is_table:
                document.add_paragraph(block.text)
                continue
            width = max(len(row) for row in block.rows) or 1
            table = document.add_table(rows=len(block.rows), cols=width)
            for row_index, row in enumerate(block.rows):
                for column_index, value in enumerate(row):
                    table.cell(row_index, column_index).text = value

        buffer = BytesIO()
        document.save(buffer)
        logger.info("Rendered plain document with %s blocks (layout=%s)", len(blocks), active)
        return buffer.getvalue()
