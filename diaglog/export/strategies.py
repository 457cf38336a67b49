"""Log export strategies.

Two ways to produce a durable, shareable copy of a channel's mirror file:

1. Managed storage (ManagedStorageExport):
   - Register an entry in the managed storage index, then stream the
     mirror file into it
   - Used when the platform provides centrally indexed shared storage

2. Legacy shared file (LegacySharedFileExport):
   - Copy the mirror file into an app-scoped public directory
   - The copy is addressed through the file provider, never by raw path

Both produce ``{prefix}-{YYYYMMDD}.log`` and overwrite an earlier export of
the same day. ExportSelector picks one per call from a capability predicate.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol

from diaglog.export.provider import FileProvider
from diaglog.export.result import ExportHandle, ExportKind, ExportResult
from diaglog.export.storage import ManagedStorageIndex
from diaglog.utils.errors import PublicDirectoryUnavailable

logger = logging.getLogger(__name__)

EXPORT_MIME_TYPE = "text/plain"

Clock = Callable[[], datetime]


def export_file_name(prefix: str, day: datetime) -> str:
    """Get the dated export file name for a channel prefix."""
    return f"{prefix}-{day.strftime('%Y%m%d')}.log"


def _source_problem(source: Path) -> Optional[str]:
    """Return why a mirror file cannot be exported, or None if it can."""
    try:
        if not source.is_file():
            return f"no log file at {source}"
        if source.stat().st_size == 0:
            return f"log file {source} is empty"
    except OSError as e:
        return f"cannot stat {source}: {e}"
    return None


class ExportStrategy(Protocol):
    """Contract shared by every export strategy."""

    kind: ExportKind

    def export(self, source: Path, prefix: str) -> ExportResult: ...


class ManagedStorageExport:
    """Export into the managed storage index."""

    kind = ExportKind.MANAGED_STORAGE

    def __init__(
        self,
        index: ManagedStorageIndex,
        relative_path: str,
        remove_orphans: bool = True,
        clock: Clock = datetime.now,
    ):
        """Initialize strategy.

        Args:
            index: Managed storage index to register exports in
            relative_path: Shared subdirectory, e.g. "Download/diaglog"
            remove_orphans: Delete an entry this export created when the
                write into it fails
            clock: Source of the export date
        """
        self.index = index
        self.relative_path = relative_path
        self.remove_orphans = remove_orphans
        self.clock = clock

    def export(self, source: Path, prefix: str) -> ExportResult:
        problem = _source_problem(source)
        if problem:
            logger.debug(f"Managed storage export skipped: {problem}")
            return ExportResult.failure(problem)

        name = export_file_name(prefix, self.clock())
        entry_uri = None
        created = False
        try:
            entry = self.index.insert(name, EXPORT_MIME_TYPE, self.relative_path)
            entry_uri = entry.uri
            created = not entry.replaced
            with self.index.open_output_stream(entry_uri) as out:
                with open(source, "rb") as src:
                    shutil.copyfileobj(src, out)
            handle = ExportHandle(
                uri=entry_uri,
                display_name=name,
                path=self.index.path_for(entry_uri),
                kind=self.kind,
            )
        except Exception as e:
            logger.warning(f"Managed storage export of {source} failed: {e}")
            # Only an entry this call created is an orphan; a replaced one
            # belongs to an earlier export
            if created and self.remove_orphans:
                self._discard(entry_uri)
            return ExportResult.failure(str(e))

        logger.info(f"Exported {source.name} to {handle.uri}")
        return ExportResult.success(handle)

    def _discard(self, uri: str) -> None:
        try:
            self.index.delete(uri)
        except Exception as e:
            logger.warning(f"Could not remove orphaned storage entry {uri}: {e}")


class LegacySharedFileExport:
    """Copy into a public directory and address the copy via the file provider."""

    kind = ExportKind.LEGACY_SHARED_FILE

    def __init__(
        self,
        public_dir: Callable[[], Optional[Path]],
        provider: FileProvider,
        clock: Clock = datetime.now,
    ):
        """Initialize strategy.

        Args:
            public_dir: Resolves the app-scoped public directory, None if unavailable
            provider: File provider that issues URIs for the copies
            clock: Source of the export date
        """
        self.public_dir = public_dir
        self.provider = provider
        self.clock = clock

    def export(self, source: Path, prefix: str) -> ExportResult:
        problem = _source_problem(source)
        if problem:
            logger.debug(f"Legacy export skipped: {problem}")
            return ExportResult.failure(problem)

        name = export_file_name(prefix, self.clock())
        try:
            directory = self.public_dir()
            if directory is None:
                raise PublicDirectoryUnavailable()
            directory.mkdir(parents=True, exist_ok=True)
            destination = directory / name
            shutil.copyfile(source, destination)
            handle = ExportHandle(
                uri=self.provider.uri_for_file(destination),
                display_name=name,
                path=destination,
                kind=self.kind,
            )
        except Exception as e:
            logger.warning(f"Legacy export of {source} failed: {e}")
            return ExportResult.failure(str(e))

        logger.info(f"Exported {source.name} to {handle.uri}")
        return ExportResult.success(handle)


class ExportSelector:
    """Chooses the export strategy from a platform capability flag.

    The capability is read on every call; it is a platform constant, so the
    choice is stable in practice but never cached here.
    """

    def __init__(
        self,
        managed_storage_available: Callable[[], bool],
        managed: ManagedStorageExport,
        legacy: LegacySharedFileExport,
    ):
        self.managed_storage_available = managed_storage_available
        self.managed = managed
        self.legacy = legacy

    def select(self) -> ExportStrategy:
        if self.managed_storage_available():
            return self.managed
        return self.legacy

    def export(self, source: Path, prefix: str) -> ExportResult:
        """Export a mirror file with the strategy the platform supports."""
        return self.select().export(source, prefix)
