"""Tests for export strategies and strategy selection."""

from datetime import datetime
from pathlib import Path

import pytest
from diaglog.export.provider import FileProvider
from diaglog.export.result import ExportKind, ExportResult
from diaglog.export.storage import FileSystemStorageIndex
from diaglog.export.strategies import (
    EXPORT_MIME_TYPE,
    ExportSelector,
    LegacySharedFileExport,
    ManagedStorageExport,
    export_file_name,
)
from diaglog.utils.errors import StorageIndexError

from conftest import FixedClock

CONTENT = "[09:26:53.589] first\n[09:26:54.001] second\n"


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "cache" / "whisper-current.log"
    path.parent.mkdir(parents=True)
    path.write_text(CONTENT, encoding="utf-8")
    return path


@pytest.fixture
def index(tmp_path):
    return FileSystemStorageIndex(tmp_path / "shared")


@pytest.fixture
def managed(index, clock):
    return ManagedStorageExport(index, "Download/diaglog", clock=clock)


@pytest.fixture
def public_dir(tmp_path):
    return tmp_path / "files" / "Download"


@pytest.fixture
def legacy(public_dir, clock):
    provider = FileProvider("diaglog.fileprovider", {"downloads": public_dir})
    return LegacySharedFileExport(lambda: public_dir, provider, clock=clock)


class FailingWriteIndex(FileSystemStorageIndex):
    """Index that registers entries but cannot open them."""

    def open_output_stream(self, uri):
        raise StorageIndexError("disk full", entry_uri=uri)


class FlakyWriteIndex(FileSystemStorageIndex):
    """Index whose output streams fail once ``failing`` is set."""

    failing = False

    def open_output_stream(self, uri):
        if self.failing:
            raise StorageIndexError("disk full", entry_uri=uri)
        return super().open_output_stream(uri)


class TestExportFileName:
    def test_dated_name(self):
        assert export_file_name("whisper", datetime(2026, 3, 4, 23, 59)) == "whisper-20260304.log"


class TestManagedStorageExport:
    """Tests for the managed storage path."""

    def test_copies_into_new_entry(self, managed, index, source):
        result = managed.export(source, "whisper")

        assert result.ok
        assert result.handle.kind == ExportKind.MANAGED_STORAGE
        assert result.handle.display_name == "whisper-20260314.log"
        assert result.handle.uri == "managed://downloads/Download/diaglog/whisper-20260314.log"
        assert result.handle.path.read_text(encoding="utf-8") == CONTENT

        entry = index.get(result.handle.uri)
        assert entry.mime_type == EXPORT_MIME_TYPE
        assert entry.relative_path == "Download/diaglog"

    def test_source_is_untouched(self, managed, source):
        managed.export(source, "whisper")
        assert source.read_text(encoding="utf-8") == CONTENT

    def test_missing_source_fails_without_entry(self, managed, index, tmp_path):
        result = managed.export(tmp_path / "nope.log", "whisper")
        assert not result
        assert result.handle is None
        assert index.list() == []

    def test_empty_source_fails_without_entry(self, managed, index, source):
        source.write_text("")
        result = managed.export(source, "whisper")
        assert not result
        assert "empty" in result.reason
        assert index.list() == []

    def test_same_day_exports_share_name(self, managed, index, source):
        """A second export the same day overwrites the first."""
        first = managed.export(source, "whisper")
        with open(source, "a", encoding="utf-8") as f:
            f.write("[10:00:00.000] third\n")
        second = managed.export(source, "whisper")

        assert first.handle.uri == second.handle.uri
        assert len(index.list()) == 1
        assert second.handle.path.read_text(encoding="utf-8").endswith("third\n")

    def test_next_day_gets_new_name(self, managed, index, source, clock):
        managed.export(source, "whisper")
        clock.now = datetime(2026, 3, 15, 0, 0, 1)
        result = managed.export(source, "whisper")
        assert result.handle.display_name == "whisper-20260315.log"
        assert len(index.list()) == 2

    def test_write_failure_removes_orphan(self, tmp_path, source, clock):
        index = FailingWriteIndex(tmp_path / "shared")
        strategy = ManagedStorageExport(index, "Download/diaglog", clock=clock)

        result = strategy.export(source, "whisper")

        assert not result
        assert "disk full" in result.reason
        assert index.list() == []

    def test_write_failure_keeps_orphan_when_asked(self, tmp_path, source, clock):
        index = FailingWriteIndex(tmp_path / "shared")
        strategy = ManagedStorageExport(
            index, "Download/diaglog", remove_orphans=False, clock=clock
        )

        assert not strategy.export(source, "whisper")
        assert [e.display_name for e in index.list()] == ["whisper-20260314.log"]

    def test_failed_reexport_keeps_earlier_export(self, tmp_path, source, clock):
        """A failed same-day export must not delete the entry it replaced."""
        index = FlakyWriteIndex(tmp_path / "shared")
        strategy = ManagedStorageExport(index, "Download/diaglog", clock=clock)
        first = strategy.export(source, "whisper")
        assert first.ok

        index.failing = True
        second = strategy.export(source, "whisper")

        assert not second
        assert [e.uri for e in index.list()] == [first.handle.uri]
        assert first.handle.path.read_text(encoding="utf-8") == CONTENT

    def test_rejected_insert_fails(self, index, source, clock):
        strategy = ManagedStorageExport(index, "../outside", clock=clock)
        result = strategy.export(source, "whisper")
        assert not result
        assert index.list() == []


class TestLegacySharedFileExport:
    """Tests for the legacy shared file path."""

    def test_copies_and_wraps_in_content_uri(self, legacy, public_dir, source):
        result = legacy.export(source, "whisper")

        assert result.ok
        assert result.handle.kind == ExportKind.LEGACY_SHARED_FILE
        assert result.handle.uri == "content://diaglog.fileprovider/downloads/whisper-20260314.log"
        assert result.handle.path == public_dir / "whisper-20260314.log"
        assert result.handle.path.read_text(encoding="utf-8") == CONTENT

    def test_missing_source_fails(self, legacy, public_dir, tmp_path):
        result = legacy.export(tmp_path / "nope.log", "whisper")
        assert not result
        assert not public_dir.exists()

    def test_empty_source_fails(self, legacy, source):
        source.write_bytes(b"")
        assert not legacy.export(source, "whisper")

    def test_unavailable_public_dir_fails(self, source, clock):
        provider = FileProvider("diaglog.fileprovider", {})
        strategy = LegacySharedFileExport(lambda: None, provider, clock=clock)
        result = strategy.export(source, "whisper")
        assert not result
        assert "unavailable" in result.reason

    def test_same_day_overwrites(self, legacy, public_dir, source):
        first = legacy.export(source, "whisper")
        source.write_text("replaced\n", encoding="utf-8")
        second = legacy.export(source, "whisper")

        assert first.handle.uri == second.handle.uri
        assert list(public_dir.iterdir()) == [public_dir / "whisper-20260314.log"]
        assert second.handle.path.read_text(encoding="utf-8") == "replaced\n"

    def test_directory_outside_provider_roots_fails(self, tmp_path, source, clock):
        provider = FileProvider("diaglog.fileprovider", {"downloads": tmp_path / "elsewhere"})
        strategy = LegacySharedFileExport(lambda: tmp_path / "public", provider, clock=clock)
        result = strategy.export(source, "whisper")
        assert not result
        assert result.handle is None


class TestExportSelector:
    """Tests for strategy selection."""

    def test_selects_by_capability(self, managed, legacy):
        selector = ExportSelector(lambda: True, managed, legacy)
        assert selector.select() is managed
        selector = ExportSelector(lambda: False, managed, legacy)
        assert selector.select() is legacy

    def test_capability_read_on_every_call(self, managed, legacy, source):
        flag = {"managed": False}
        selector = ExportSelector(lambda: flag["managed"], managed, legacy)

        assert selector.export(source, "whisper").handle.kind == ExportKind.LEGACY_SHARED_FILE
        flag["managed"] = True
        assert selector.export(source, "whisper").handle.kind == ExportKind.MANAGED_STORAGE


class TestExportResult:
    def test_failure_has_no_handle(self):
        result = ExportResult.failure("nope")
        assert result.handle is None
        assert not result.ok
        assert not result
