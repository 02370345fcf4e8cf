"""Tests for the extension allow-list."""

from __future__ import annotations

import pytest

from foldersync.sync.extensions import (
    DEFAULT_EXTENSIONS,
    ExtensionFilter,
    is_trackable,
    normalize_extensions,
)


class TestIsTrackable:
    """Tests for the default allow-list."""

    @pytest.mark.parametrize("name", [f"image.{ext}" for ext in DEFAULT_EXTENSIONS])
    def test_default_extensions_accepted(self, name: str) -> None:
        """Every default extension should be trackable."""
        assert is_trackable(name) is True

    def test_case_insensitive(self) -> None:
        """Extension matching should ignore case."""
        assert is_trackable("HOLIDAY.JPG") is True
        assert is_trackable("scan.TiFf") is True

    def test_unknown_extension_rejected(self) -> None:
        """Non-image extensions should be rejected."""
        assert is_trackable("notes.txt") is False
        assert is_trackable("archive.zip") is False

    def test_no_dot_rejected(self) -> None:
        """Names without a dot should be rejected."""
        assert is_trackable("README") is False
        assert is_trackable("jpg") is False

    def test_first_dot_is_used(self) -> None:
        """The extension starts after the FIRST dot, so multi-dot names are rejected."""
        assert is_trackable("photo.v2.jpg") is False
        assert is_trackable("archive.tar.png") is False

    def test_hidden_file_with_extension_only(self) -> None:
        """A name like '.png' has extension 'png'."""
        assert is_trackable(".png") is True

    def test_trailing_dot_rejected(self) -> None:
        """A trailing dot leaves an empty extension."""
        assert is_trackable("image.") is False


class TestExtensionFilter:
    """Tests for custom allow-lists."""

    def test_custom_extensions(self) -> None:
        """Should accept only configured extensions."""
        ext_filter = ExtensionFilter(["webp", "png"])

        assert ext_filter.is_trackable("a.webp") is True
        assert ext_filter.is_trackable("a.png") is True
        assert ext_filter.is_trackable("a.jpg") is False

    def test_normalizes_dots_and_case(self) -> None:
        """Leading dots and upper case in the allow-list are normalized."""
        ext_filter = ExtensionFilter([".WEBP", " Png "])

        assert ext_filter.extensions == frozenset({"webp", "png"})
        assert ext_filter.is_trackable("a.WebP") is True

    def test_normalize_extensions_keeps_order_and_dedupes(self) -> None:
        """normalize_extensions should keep first occurrence order."""
        assert normalize_extensions(["PNG", ".jpg", "png", ""]) == ("png", "jpg")
