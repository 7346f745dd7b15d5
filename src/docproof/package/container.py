"""In-memory ZIP package holding named, mutable parts."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging
import zlib
from zipfile import BadZipFile, LargeZipFile, ZIP_DEFLATED, ZipFile, ZipInfo

from docproof.errors import PackageCorruptError, PartMissingError, SizeLimitError

logger = logging.getLogger(__name__)

_DEFAULT_DATE_TIME = (1980, 1, 1, 0, 0, 0)


@dataclass(slots=True)
class Part:
    """One named entry of a package with the metadata needed to write it back."""

    name: str
    data: bytes
    date_time: tuple[int, int, int, int, int, int] = _DEFAULT_DATE_TIME
    external_attr: int = 0


class PackageContainer:
    """ZIP-based package whose parts can be read, replaced and re-serialized.

    Mutations stay in memory; nothing is observable outside the instance
    until `serialize` returns a complete buffer.
    """

    def __init__(self, parts: list[Part] | None = None) -> None:
        self._parts: dict[str, Part] = {}
        for part in parts or []:
            self._parts[part.name] = part

    @classmethod
    def open(cls, data: bytes, *, max_uncompressed_size: int | None = None) -> "PackageContainer":
        """Read every entry of a ZIP buffer into memory."""

        try:
            with ZipFile(BytesIO(data)) as archive:
                infos = archive.infolist()
                if max_uncompressed_size is not None:
                    declared_total = sum(info.file_size for info in infos)
                    if declared_total > max_uncompressed_size:
                        raise SizeLimitError(
                            f"Package expands to {declared_total} bytes, above the "
                            f"{max_uncompressed_size} byte limit"
                        )
                parts = [
                    Part(
                        name=info.filename,
                        data=archive.read(info),
                        date_time=info.date_time,
                        external_attr=info.external_attr,
                    )
                    for info in infos
                ]
        # zlib.error: corrupt DEFLATE stream; RuntimeError: encrypted entry;
        # NotImplementedError: unsupported compression method.
        except (BadZipFile, LargeZipFile, EOFError, ValueError, zlib.error, RuntimeError, NotImplementedError) as exc:
            raise PackageCorruptError(f"Not a readable ZIP package: {exc}") from exc

        logger.debug("Opened package with %s parts", len(parts))
        return cls(parts)

    def names(self) -> list[str]:
        return list(self._parts)

    def has_part(self, path: str) -> bool:
        return path in self._parts

    def get_part_bytes(self, path: str) -> bytes:
        part = self._parts.get(path)
        if part is None:
            raise PartMissingError("Package part not found", part=path)
        return part.data

    def get_part(self, path: str) -> str:
        return self.get_part_bytes(path).decode("utf-8")

    def set_part(self, path: str, content: str | bytes) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        existing = self._parts.get(path)
        if existing is None:
            self._parts[path] = Part(name=path, data=data)
            return
        existing.data = data

    def copy(self) -> "PackageContainer":
        return PackageContainer(
            [
                Part(name=part.name, data=part.data, date_time=part.date_time, external_attr=part.external_attr)
                for part in self._parts.values()
            ]
        )

    def serialize(self, compression_level: int = 6) -> bytes:
        """Write all parts, in their original order, to a new DEFLATE archive."""

        if not 0 <= compression_level <= 9:
            raise ValueError("compression_level must be between 0 and 9")

        buffer = BytesIO()
        with ZipFile(buffer, "w", compression=ZIP_DEFLATED, compresslevel=compression_level) as archive:
            for part in self._parts.values():
                info = ZipInfo(part.name, date_time=part.date_time)
                info.external_attr = part.external_attr
                info.compress_type = ZIP_DEFLATED
                archive.writestr(info, part.data, compresslevel=compression_level)
        return buffer.getvalue()
