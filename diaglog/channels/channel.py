"""Bounded, masked log channel with a durable mirror file.

Each channel keeps the most recent ``capacity`` records in memory and appends
every record to ``{cache_dir}/{prefix}-current.log``. The buffer is a recent
window; the mirror file is everything the channel ever wrote. They are
independent views and are not expected to match.

Usage:
    channel = LogChannel(
        tag="Whisper",
        file_prefix="whisper",
        cache_dir=Path("/tmp/cache"),
        exporter=selector,
        strings=strings,
        notifier=notifier,
        share_sheet=share_sheet,
        mask=mask_secrets,
    )
    channel.write("Transcription started with sk-ABCDEFGHIJKLMNOP")
    channel.lines()  # ['[12:00:00.000] Transcription started with sk-ABCD…MNOP']
    channel.save()
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Deque, List, Optional

from diaglog.channels.masking import MaskFn, identity
from diaglog.channels.records import LogRecord
from diaglog.export.result import ExportKind, ExportResult
from diaglog.export.strategies import EXPORT_MIME_TYPE, ExportSelector
from diaglog.notices import DiagnosticsStrings, Notifier, ShareSheet

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 500


@dataclass(frozen=True)
class MirrorWrite:
    """Outcome of a best-effort mirror append.

    ``write`` returns it so the fire-and-forget contract is visible; callers
    are free to drop it.
    """

    written: bool
    error: Optional[str] = None


class LogChannel:
    """One named log stream: ring buffer, mirror file and export."""

    def __init__(
        self,
        tag: str,
        file_prefix: str,
        cache_dir: Path,
        exporter: ExportSelector,
        strings: DiagnosticsStrings,
        notifier: Notifier,
        share_sheet: ShareSheet,
        mask: MaskFn = identity,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize channel.

        Args:
            tag: Name of the channel's Python logger (diaglog.channel.<tag>)
            file_prefix: Prefix of the mirror and export file names
            cache_dir: Directory holding the mirror file
            exporter: Strategy selector used by export()
            strings: User-visible texts for share/save notices
            notifier: Shows short notices
            share_sheet: Receives exported files for sharing
            mask: Redaction applied to every written line
            capacity: Maximum records kept in memory
            clock: Source of record timestamps
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")

        self.tag = tag
        self.file_prefix = file_prefix
        self.mirror_path = Path(cache_dir) / f"{file_prefix}-current.log"
        self.exporter = exporter
        self.strings = strings
        self.notifier = notifier
        self.share_sheet = share_sheet
        self.mask = mask
        self.clock = clock

        self._buffer: Deque[LogRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        # Serialises mirror appends against export reads
        self._mirror_lock = threading.Lock()
        self._channel_logger = logging.getLogger(f"diaglog.channel.{tag}")

        try:
            self.mirror_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug(f"Cannot create cache dir for {tag}: {e}")

    @property
    def capacity(self) -> int:
        return self._buffer.maxlen

    @property
    def masked(self) -> bool:
        return self.mask is not identity

    def mask_for_display(self, text: str) -> str:
        """Mask text for notices and notifications without logging it."""
        return self.mask(text)

    def write(self, text: str) -> MirrorWrite:
        """Record a line.

        The masked line goes to the ring buffer (evicting the oldest record
        when full), to the channel logger at DEBUG, and to the mirror file.
        Never raises; a failed mirror append only shows in the returned
        MirrorWrite.
        """
        record = LogRecord(timestamp=self.clock(), text=self.mask(text))
        line = record.line

        with self._lock:
            self._buffer.append(record)

        self._channel_logger.debug(line)
        return self._append_mirror(line)

    def _append_mirror(self, line: str) -> MirrorWrite:
        try:
            with self._mirror_lock:
                with open(self.mirror_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except (OSError, ValueError) as e:
            logger.debug(f"Mirror append to {self.mirror_path} failed: {e}")
            return MirrorWrite(written=False, error=str(e))
        return MirrorWrite(written=True)

    def records(self) -> List[LogRecord]:
        """Snapshot of the buffered records, oldest first."""
        with self._lock:
            return list(self._buffer)

    def lines(self) -> List[str]:
        """Snapshot of the buffered records as rendered lines."""
        return [record.line for record in self.records()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def export(self) -> ExportResult:
        """Export the mirror file. Failure is reported by the result only."""
        try:
            with self._mirror_lock:
                return self.exporter.export(self.mirror_path, self.file_prefix)
        except Exception as e:
            logger.warning(f"Export of {self.tag} logs failed: {e}")
            return ExportResult.failure(str(e))

    def share(self) -> ExportResult:
        """Export and hand the file to the share sheet."""
        result = self.export()
        if not result:
            self.write("Share logs requested but no log file available")
            self._notify(self.strings.unavailable_message)
            return result

        self.write("Share logs requested")
        try:
            self.share_sheet.share(result.handle, EXPORT_MIME_TYPE, self.strings.share_title)
        except Exception as e:
            logger.warning(f"Share sheet rejected {result.handle.uri}: {e}")
        return result

    def save(self) -> ExportResult:
        """Export and tell the user where the file went."""
        result = self.export()
        if not result:
            self.write("Save logs requested but export failed")
            self._notify(self.strings.export_failed)
            return result

        self.write("Logs exported")
        if result.handle.kind == ExportKind.MANAGED_STORAGE:
            self._notify(self.strings.export_success)
        else:
            self._notify(self.strings.export_saved_legacy)
        return result

    def _notify(self, message: str) -> None:
        try:
            self.notifier.notify(message)
        except Exception as e:
            logger.warning(f"Notifier failed for {self.tag}: {e}")

    def __repr__(self) -> str:
        return f"LogChannel(tag={self.tag!r}, prefix={self.file_prefix!r}, capacity={self.capacity})"
