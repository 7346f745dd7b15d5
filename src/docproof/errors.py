"""Domain errors raised inside components and converted to results at their boundaries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DocproofError(Exception):
    """Base class for every failure the correction pipeline reports."""

    message: str

    def __str__(self) -> str:
        return self.message


class UnsupportedFormatError(DocproofError):
    """Neither the declared kind nor the filename extension is recognized."""


class MalformedDocumentError(DocproofError):
    """The container opened but a required part is absent or unreadable."""


class SizeLimitError(DocproofError):
    """Input exceeds a configured maximum."""


class RuleLoadError(DocproofError):
    """The proofreading rule table could not be loaded."""


class PackagePatchError(DocproofError):
    """Regeneration cannot locate a required part or reconcile the text."""


class PackageCorruptError(DocproofError):
    """The byte buffer is not a readable ZIP package."""


@dataclass(slots=True)
class PartMissingError(DocproofError):
    """A named part is not present in the package."""

    part: str = ""

    def __str__(self) -> str:
        return f"{self.message} (part={self.part})"


class OperationTimeoutError(DocproofError):
    """A request ran past its deadline."""


__all__ = [
    "DocproofError",
    "MalformedDocumentError",
    "OperationTimeoutError",
    "PackageCorruptError",
    "PackagePatchError",
    "PartMissingError",
    "RuleLoadError",
    "SizeLimitError",
    "UnsupportedFormatError",
]
