"""Tests for CLI commands - scan, watch, config."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from watchdog.events import FileCreatedEvent

from foldersync.cli import cli, setup_logging
from foldersync.cli.watch import format_change
from foldersync.core.types import ChangeKind, CollectionChange, TrackedItem
from foldersync.sync.synchronizer import DirectorySynchronizer


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_dir(tmp_path: Path) -> Iterator[Path]:
    """Point the config directory at a temporary location."""
    config = tmp_path / ".foldersync"
    with patch("foldersync.cli.config.get_config_dir", return_value=config):
        yield config


@pytest.fixture
def images(tmp_path: Path) -> Path:
    """Create a directory with a few files."""
    folder = tmp_path / "images"
    folder.mkdir()
    for name in ("a.jpg", "b.txt", "c.png"):
        (folder / name).write_bytes(b"data")
    return folder


class TestScanCommand:
    """Tests for 'foldersync scan' command."""

    def test_scan_lists_trackable_files(
        self, runner: CliRunner, config_dir: Path, images: Path
    ) -> None:
        """Scan should print trackable files and a count."""
        result = runner.invoke(cli, ["scan", str(images)])

        assert result.exit_code == 0
        assert "a.jpg" in result.output
        assert "c.png" in result.output
        assert "b.txt" not in result.output
        assert "2 tracked files" in result.output

    def test_scan_with_custom_extensions(
        self, runner: CliRunner, config_dir: Path, images: Path
    ) -> None:
        """--extensions should replace the allow-list."""
        result = runner.invoke(cli, ["scan", str(images), "--extensions", "txt"])

        assert result.exit_code == 0
        assert "b.txt" in result.output
        assert "1 tracked files" in result.output

    def test_scan_uses_configured_directory(
        self, runner: CliRunner, config_dir: Path, images: Path
    ) -> None:
        """Without argument, scan should use the configured folder."""
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"directory": str(images)}))

        result = runner.invoke(cli, ["scan"])

        assert result.exit_code == 0
        assert "2 tracked files" in result.output

    def test_scan_missing_directory(
        self, runner: CliRunner, config_dir: Path, tmp_path: Path
    ) -> None:
        """A missing directory should fail with an error message."""
        result = runner.invoke(cli, ["scan", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Directory not found" in result.output

    def test_scan_without_any_directory(self, runner: CliRunner, config_dir: Path) -> None:
        """No argument and no config should fail."""
        result = runner.invoke(cli, ["scan"])

        assert result.exit_code == 1
        assert "No directory configured" in result.output

    def test_scan_ignores_events_seen_during_the_pass(
        self, runner: CliRunner, config_dir: Path, images: Path
    ) -> None:
        """Watcher events raised while scanning should not change the listing."""

        class EventDuringScan(DirectorySynchronizer):
            def resynchronize(self):
                result = super().resynchronize()
                late = self.directory / "late.jpg"
                late.write_bytes(b"data")
                self.on_created(FileCreatedEvent(str(late)))
                return result

        with patch("foldersync.cli.scan.DirectorySynchronizer", EventDuringScan):
            result = runner.invoke(cli, ["scan", str(images)])

        assert result.exit_code == 0
        assert "late.jpg" not in result.output
        assert "2 tracked files" in result.output


class TestWatchCommand:
    """Tests for 'foldersync watch' command."""

    def test_watch_reports_initial_items(
        self, runner: CliRunner, config_dir: Path, images: Path
    ) -> None:
        """Watch should list the initial items and stop after the timeout."""
        result = runner.invoke(cli, ["watch", str(images), "--timeout", "0.3"])

        assert result.exit_code == 0
        assert "Tracking 2 files" in result.output
        assert "= " in result.output
        assert "Tracked 2 files" in result.output

    def test_watch_with_rescan_interval(
        self, runner: CliRunner, config_dir: Path, images: Path
    ) -> None:
        """A periodic rescan should not disturb a steady directory."""
        result = runner.invoke(
            cli, ["watch", str(images), "--timeout", "0.5", "--rescan-interval", "0.1"]
        )

        assert result.exit_code == 0
        assert "Tracked 2 files" in result.output
        assert "errors" not in result.output

    def test_watch_missing_directory(
        self, runner: CliRunner, config_dir: Path, tmp_path: Path
    ) -> None:
        """A missing directory should fail with an error message."""
        result = runner.invoke(cli, ["watch", str(tmp_path / "missing"), "--timeout", "0.1"])

        assert result.exit_code == 1
        assert "Directory not found" in result.output

    def test_watch_invalid_category_name(
        self, runner: CliRunner, config_dir: Path, images: Path
    ) -> None:
        """An invalid category name should be reported."""
        result = runner.invoke(cli, ["watch", str(images), "--name", "bad[name]"])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestFormatChange:
    """Tests for change rendering."""

    def test_formats(self) -> None:
        """Each change kind has its own marker."""
        item = TrackedItem.create(Path("/pics/new.jpg"))

        assert format_change(CollectionChange(ChangeKind.ADDED, item, 0)).startswith("  + ")
        assert format_change(CollectionChange(ChangeKind.REMOVED, item, 0)).startswith("  - ")
        renamed = format_change(
            CollectionChange(ChangeKind.RENAMED, item, 0, old_path=Path("/pics/old.jpg"))
        )
        assert "old.jpg -> " in renamed
        assert renamed.endswith("new.jpg")


class TestConfigCommand:
    """Tests for 'foldersync config' command."""

    def test_show_empty(self, runner: CliRunner, config_dir: Path) -> None:
        """With no config, show a hint."""
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        assert "No configuration found" in result.output

    def test_set_and_show(self, runner: CliRunner, config_dir: Path, images: Path) -> None:
        """Saved values should be shown afterwards."""
        result = runner.invoke(
            cli, ["config", "--directory", str(images), "--extensions", "PNG,.gif"]
        )
        assert result.exit_code == 0
        saved = json.loads((config_dir / "config.json").read_text())
        assert saved["directory"] == str(images.resolve())
        assert saved["extensions"] == ["png", "gif"]

        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert f"directory: {images.resolve()}" in result.output
        assert "extensions: png,gif" in result.output

    def test_rejects_negative_interval(self, runner: CliRunner, config_dir: Path) -> None:
        """A negative interval should not be saved."""
        result = runner.invoke(cli, ["config", "--rescan-interval", "-1"])

        assert result.exit_code == 1
        assert not (config_dir / "config.json").exists()

    def test_rejects_empty_extensions(self, runner: CliRunner, config_dir: Path) -> None:
        """An empty extension list should not be saved."""
        result = runner.invoke(cli, ["config", "--extensions", ","])

        assert result.exit_code == 1


class TestCliGroup:
    """Tests for global options."""

    def test_verbose_and_log_file(
        self, runner: CliRunner, config_dir: Path, images: Path, tmp_path: Path
    ) -> None:
        """-vv with --log-file should write debug logs to the file."""
        log_file = tmp_path / "logs" / "foldersync.log"

        result = runner.invoke(cli, ["-vv", "--log-file", str(log_file), "scan", str(images)])

        assert result.exit_code == 0
        assert log_file.exists()
        assert "Watching" in log_file.read_text()

    def test_setup_logging_writes_to_stderr(self) -> None:
        """Log records should go to stderr, keeping stdout for command output."""
        setup_logging(logging.INFO)

        handlers = logging.getLogger("foldersync").handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
