"""lxml helpers shared by extraction and reconciliation of OOXML parts."""

from __future__ import annotations

import re

from lxml import etree

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
S_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
XML_NS = "http://www.w3.org/XML/1998/namespace"

NS = {"w": W_NS, "s": S_NS}

# C0 controls other than tab, LF and CR, lone surrogates, and the U+FFFE/U+FFFF noncharacters.
_ILLEGAL_XML_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def qn(tag: str) -> str:
    """Expand a `prefix:local` name into Clark notation."""

    prefix, local = tag.split(":", 1)
    return f"{{{NS[prefix]}}}{local}"


def local_name(element: etree._Element) -> str:
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _build_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)


def parse_xml(payload: bytes) -> etree._Element:
    """Parse a package part without entity expansion or network access."""

    return etree.fromstring(payload, parser=_build_parser())


def serialize_xml(root: etree._Element) -> bytes:
    """Serialize a parsed part keeping its XML declaration and standalone flag."""

    docinfo = root.getroottree().docinfo
    return etree.tostring(
        root,
        xml_declaration=True,
        encoding=docinfo.encoding or "UTF-8",
        standalone=docinfo.standalone,
    )


def sanitize_xml_string(text: str) -> str:
    """Remove characters that are illegal in XML 1.0 (tab, LF and CR are kept)."""

    if not text:
        return text
    return _ILLEGAL_XML_RE.sub("", text)


def set_element_text(element: etree._Element, text: str) -> None:
    """Replace an element's text, marking edge whitespace as significant."""

    clean = sanitize_xml_string(text)
    element.text = clean
    if clean and (clean[0].isspace() or clean[-1].isspace()):
        element.set(f"{{{XML_NS}}}space", "preserve")
