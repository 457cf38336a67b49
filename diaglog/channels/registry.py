"""Registry of diagnostics channels.

The registry is the context object of the logging core: build it once at
startup and pass it to whatever needs a channel. Each DiagnosticsStream gets
exactly one LogChannel, created on first access.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from diaglog.channels.channel import LogChannel
from diaglog.channels.masking import identity, mask_secrets
from diaglog.channels.streams import DiagnosticsStream
from diaglog.config import DiagnosticsSettings
from diaglog.export.provider import FileProvider
from diaglog.export.storage import FileSystemStorageIndex, ManagedStorageIndex
from diaglog.export.strategies import (
    ExportSelector,
    LegacySharedFileExport,
    ManagedStorageExport,
)
from diaglog.notices import DiagnosticsStrings, Notifier, ShareSheet

logger = logging.getLogger(__name__)

PROVIDER_ROOT = "downloads"


@dataclass(frozen=True)
class ChannelSpec:
    """Built-in definition of one stream's channel."""

    tag: str
    file_prefix: str
    masked: bool
    strings: DiagnosticsStrings


CHANNEL_SPECS: Dict[DiagnosticsStream, ChannelSpec] = {
    DiagnosticsStream.WHISPER: ChannelSpec(
        tag="Whisper",
        file_prefix="whisper",
        masked=True,
        strings=DiagnosticsStrings(
            share_action="Share logs",
            save_action="Save logs",
            share_title="Share Whisper logs",
            unavailable_message="No Whisper logs available yet",
            export_success="Whisper logs saved to Downloads",
            export_saved_legacy="Whisper logs saved to app storage",
            export_failed="Failed to export Whisper logs",
        ),
    ),
    DiagnosticsStream.THEME: ChannelSpec(
        tag="ThemeDiag",
        file_prefix="theme",
        masked=False,
        strings=DiagnosticsStrings(
            share_action="Share theme logs",
            save_action="Save logs",
            share_title="Share theme logs",
            unavailable_message="No theme logs available yet",
            export_success="Theme logs saved to Downloads",
            export_saved_legacy="Theme logs saved to app storage",
            export_failed="Failed to export theme logs",
        ),
    ),
}


class ChannelRegistry:
    """One lazily created LogChannel per DiagnosticsStream.

    Usage:
        registry = ChannelRegistry(settings, notifier, share_sheet)
        registry.channel(DiagnosticsStream.WHISPER).write("model loaded")
    """

    def __init__(
        self,
        settings: DiagnosticsSettings,
        notifier: Notifier,
        share_sheet: ShareSheet,
        storage_index: Optional[ManagedStorageIndex] = None,
        managed_storage_available: Optional[Callable[[], bool]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize registry.

        Args:
            settings: Diagnostics settings, read when a channel is built
            notifier: Shows short notices for every channel
            share_sheet: Receives exported files for every channel
            storage_index: Managed storage index (defaults to a directory index)
            managed_storage_available: Capability predicate (defaults to the
                settings flag)
            clock: Source of record timestamps and export dates
        """
        self.settings = settings
        self.notifier = notifier
        self.share_sheet = share_sheet
        self.clock = clock

        if storage_index is None:
            root = settings.managed_storage_root or settings.cache_dir / "shared"
            storage_index = FileSystemStorageIndex(root)
        self.storage_index = storage_index

        if managed_storage_available is None:
            managed_storage_available = lambda: settings.managed_storage

        roots = {}
        if settings.public_dir is not None:
            roots[PROVIDER_ROOT] = settings.public_dir
        self.file_provider = FileProvider(settings.provider_authority, roots)

        self.exporter = ExportSelector(
            managed_storage_available=managed_storage_available,
            managed=ManagedStorageExport(
                storage_index,
                settings.relative_path,
                remove_orphans=settings.remove_orphans,
                clock=clock,
            ),
            legacy=LegacySharedFileExport(
                public_dir=lambda: settings.public_dir,
                provider=self.file_provider,
                clock=clock,
            ),
        )

        self._channels: Dict[DiagnosticsStream, LogChannel] = {}
        self._lock = threading.Lock()

    def channel(self, stream: DiagnosticsStream) -> LogChannel:
        """Get the channel of a stream, building it on first access."""
        channel = self._channels.get(stream)
        if channel is not None:
            return channel

        with self._lock:
            channel = self._channels.get(stream)
            if channel is None:
                channel = self._build(stream)
                self._channels[stream] = channel
        return channel

    def __getitem__(self, stream: DiagnosticsStream) -> LogChannel:
        return self.channel(stream)

    def _build(self, stream: DiagnosticsStream) -> LogChannel:
        spec = CHANNEL_SPECS[stream]
        override = self.settings.override_for(stream)

        masked = spec.masked if override.masked is None else override.masked
        capacity = override.capacity or self.settings.capacity

        logger.debug(
            f"Creating channel {spec.tag} (capacity={capacity}, masked={masked})"
        )
        return LogChannel(
            tag=spec.tag,
            file_prefix=spec.file_prefix,
            cache_dir=self.settings.cache_dir,
            exporter=self.exporter,
            strings=spec.strings,
            notifier=self.notifier,
            share_sheet=self.share_sheet,
            mask=mask_secrets if masked else identity,
            capacity=capacity,
            clock=self.clock,
        )

    def created(self) -> List[DiagnosticsStream]:
        """Streams whose channel has been built so far."""
        with self._lock:
            return list(self._channels)

    @staticmethod
    def from_name(name: Any) -> Optional[DiagnosticsStream]:
        """Get a stream by name, None if blank or unknown."""
        return DiagnosticsStream.from_name(name)
