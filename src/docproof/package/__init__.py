"""ZIP package access for OOXML documents."""

from .container import PackageContainer, Part

__all__ = ["PackageContainer", "Part"]
