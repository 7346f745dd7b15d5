from __future__ import annotations

from io import BytesIO
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

import pytest

from docproof.errors import PackageCorruptError, PartMissingError, SizeLimitError
from docproof.package import PackageContainer


def _zip(parts: dict[str, bytes]) -> bytes:
    buffer = BytesIO()
    with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
        for name, data in parts.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def test_open_reads_parts_in_archive_order() -> None:
    data = _zip({"b.xml": b"<b/>", "a.xml": b"<a/>", "media/image1.png": b"\x89PNG"})

    container = PackageContainer.open(data)

    assert container.names() == ["b.xml", "a.xml", "media/image1.png"]
    assert container.has_part("a.xml")
    assert container.get_part("a.xml") == "<a/>"
    assert container.get_part_bytes("media/image1.png") == b"\x89PNG"


def test_open_rejects_non_zip_buffer() -> None:
    with pytest.raises(PackageCorruptError):
        PackageContainer.open(b"plain text, not a package")


def test_open_rejects_declared_expansion_over_limit() -> None:
    data = _zip({"big.xml": b"x" * 5000})

    with pytest.raises(SizeLimitError, match="5000 bytes"):
        PackageContainer.open(data, max_uncompressed_size=1000)


def test_missing_part_names_the_part() -> None:
    container = PackageContainer.open(_zip({"a.xml": b"<a/>"}))

    with pytest.raises(PartMissingError) as excinfo:
        container.get_part("word/document.xml")

    assert excinfo.value.part == "word/document.xml"
    assert "word/document.xml" in str(excinfo.value)


def test_set_part_replaces_in_place_and_appends_new_names() -> None:
    container = PackageContainer.open(_zip({"a.xml": b"<a/>", "b.xml": b"<b/>"}))

    container.set_part("a.xml", "<a>changed</a>")
    container.set_part("c.xml", b"<c/>")

    assert container.names() == ["a.xml", "b.xml", "c.xml"]
    assert container.get_part("a.xml") == "<a>changed</a>"


def test_copy_is_independent_of_source() -> None:
    source = PackageContainer.open(_zip({"a.xml": b"<a/>"}))

    clone = source.copy()
    clone.set_part("a.xml", "<a>new</a>")

    assert source.get_part("a.xml") == "<a/>"
    assert clone.get_part("a.xml") == "<a>new</a>"


def test_serialize_round_trips_parts_with_deflate() -> None:
    container = PackageContainer.open(_zip({"a.xml": b"<a/>" * 50, "b.bin": b"\x00\x01"}))
    container.set_part("a.xml", "<a>patched</a>")

    output = container.serialize()

    with ZipFile(BytesIO(output)) as archive:
        assert archive.namelist() == ["a.xml", "b.bin"]
        assert archive.read("a.xml") == b"<a>patched</a>"
        assert archive.read("b.bin") == b"\x00\x01"
        assert all(info.compress_type == ZIP_DEFLATED for info in archive.infolist())


def test_serialize_rejects_invalid_compression_level() -> None:
    container = PackageContainer.open(_zip({"a.xml": b"<a/>"}))

    with pytest.raises(ValueError):
        container.serialize(compression_level=12)


def test_open_rejects_corrupt_deflate_stream(make_docx, paragraph, damage_part) -> None:
    body = "".join(paragraph(f"第{index}段落の本文です。") for index in range(40))
    data = damage_part(make_docx(body), "word/document.xml")

    with pytest.raises(PackageCorruptError):
        PackageContainer.open(data)


def test_open_rejects_unsupported_compression_method() -> None:
    buffer = BytesIO()
    with ZipFile(buffer, "w") as archive:
        info = ZipInfo("a.xml")
        info.compress_type = ZIP_DEFLATED
        archive.writestr(info, b"<a/>" * 20)
    raw = bytearray(buffer.getvalue())
    # Method field of both the local header and the central directory entry; 99 is AES.
    raw[8:10] = (99).to_bytes(2, "little")
    central = raw.rfind(b"PK\x01\x02")
    raw[central + 10 : central + 12] = (99).to_bytes(2, "little")

    with pytest.raises(PackageCorruptError):
        PackageContainer.open(bytes(raw))
