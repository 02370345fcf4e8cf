"""Extension allow-list for trackable files.

This module provides:
- ExtensionFilter: Classifies a bare file name by its extension
- is_trackable: Shortcut using the default allow-list
- DEFAULT_EXTENSIONS: Image formats tracked out of the box

The extension is everything after the FIRST dot of the name, so
``photo.v2.jpg`` yields ``v2.jpg`` and is not trackable. Tests pin this
behavior; changing it must be a deliberate decision.
"""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "jpg",
    "jpeg",
    "jpe",
    "jfif",
    "exif",
    "gif",
    "png",
    "tif",
    "tiff",
    "bmp",
    "dib",
)


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    """Lower-case extensions and strip a leading dot, keeping order.

    Args:
        extensions: Extensions such as ``"JPG"`` or ``".png"``.

    Returns:
        Unique, normalized extensions.
    """
    normalized: list[str] = []
    for extension in extensions:
        ext = extension.strip().lstrip(".").lower()
        if ext and ext not in normalized:
            normalized.append(ext)
    return tuple(normalized)


class ExtensionFilter:
    """Decides whether a file name belongs to the tracked collection."""

    def __init__(self, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        """Initialize with an allow-list.

        Args:
            extensions: Allowed extensions, with or without leading dot.
        """
        self._extensions = frozenset(normalize_extensions(extensions))

    @property
    def extensions(self) -> frozenset[str]:
        """Get the normalized allow-list."""
        return self._extensions

    def is_trackable(self, file_name: str) -> bool:
        """Check if a bare file name has an allowed extension.

        Args:
            file_name: File name without directory component.

        Returns:
            True if the text after the first dot is in the allow-list.
        """
        dot = file_name.find(".")
        if dot < 0:
            return False
        return file_name[dot + 1 :].lower() in self._extensions

    def __repr__(self) -> str:
        return f"ExtensionFilter({sorted(self._extensions)!r})"


_DEFAULT_FILTER = ExtensionFilter()


def is_trackable(file_name: str) -> bool:
    """Check a file name against the default allow-list."""
    return _DEFAULT_FILTER.is_trackable(file_name)
