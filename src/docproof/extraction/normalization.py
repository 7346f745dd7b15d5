"""Text flattening helpers used by the extraction adapters."""

from __future__ import annotations

import re
from typing import Iterator

from lxml import etree

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def iter_text_nodes(element: etree._Element) -> Iterator[str]:
    """Yield element text and tails in document order, skipping comments and PIs."""

    if isinstance(element.tag, str) and element.text:
        yield element.text
    for child in element:
        yield from iter_text_nodes(child)
        if child.tail:
            yield child.tail


def strip_tags(element: etree._Element) -> str:
    """Flatten an element the way tag stripping does: every tag boundary reads as a space."""

    return normalize_whitespace(" ".join(iter_text_nodes(element)))
