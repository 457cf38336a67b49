"""Managed shared storage index.

Managed storage is a centrally indexed area where an entry must be registered
before anything can be written to it. Entries are addressed by URI; the
backing file location is the index's business.

FileSystemStorageIndex keeps entries under a root directory and persists the
entry metadata in ``index.json``:

    <root>/index.json
    <root>/<relative_path>/<display_name>
"""

import json
import logging
import threading
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Dict, List, Optional, Any, Protocol

from diaglog.utils.errors import StorageIndexError

logger = logging.getLogger(__name__)

MANAGED_SCHEME = "managed"


@dataclass
class StorageEntry:
    """One registered entry in the managed storage index."""

    uri: str
    display_name: str
    mime_type: str
    relative_path: str
    created_at: str  # ISO format
    # Set by insert() when an entry with the same URI already existed
    replaced: bool = field(default=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("replaced")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StorageEntry":
        return cls(**data)


class ManagedStorageIndex(Protocol):
    """What the managed-storage export needs from a storage index."""

    def insert(
        self, display_name: str, mime_type: str, relative_path: str
    ) -> StorageEntry: ...

    def open_output_stream(self, uri: str) -> BinaryIO: ...

    def delete(self, uri: str) -> bool: ...

    def path_for(self, uri: str) -> Path: ...


class FileSystemStorageIndex:
    """Directory-backed managed storage index."""

    def __init__(self, root: Path, authority: str = "downloads"):
        """Initialize index.

        Args:
            root: Directory holding the index file and entry contents
            authority: Authority part of entry URIs
        """
        self.root = Path(root)
        self.authority = authority
        self.index_file = self.root / "index.json"
        self._entries: Dict[str, StorageEntry] = {}
        self._lock = threading.Lock()
        self._load_index()

    def _load_index(self) -> None:
        """Load the entry index."""
        if not self.index_file.exists():
            return
        try:
            with open(self.index_file, encoding="utf-8") as f:
                data = json.load(f)
            self._entries = {
                item["uri"]: StorageEntry.from_dict(item) for item in data
            }
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to load storage index {self.index_file}: {e}")
            self._entries = {}

    def _save_index(self) -> None:
        """Save the entry index. Must be called with self._lock held."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with open(self.index_file, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in self._entries.values()], f, indent=2)
        except OSError as e:
            raise StorageIndexError(f"Failed to save storage index: {e}") from e

    def _build_uri(self, relative_path: str, display_name: str) -> str:
        return f"{MANAGED_SCHEME}://{self.authority}/{relative_path}/{display_name}"

    @staticmethod
    def _check_relative(relative_path: str, display_name: str) -> None:
        rel = PurePosixPath(relative_path)
        if not relative_path or rel.is_absolute() or ".." in rel.parts:
            raise StorageIndexError(f"Invalid relative path: {relative_path!r}")
        if not display_name or "/" in display_name or display_name in (".", ".."):
            raise StorageIndexError(f"Invalid display name: {display_name!r}")

    def insert(
        self,
        display_name: str,
        mime_type: str,
        relative_path: str,
    ) -> StorageEntry:
        """Register a new entry.

        An entry with the same relative path and display name is replaced,
        so the returned URI is stable for a given name. The returned
        entry's ``replaced`` flag tells whether that happened.

        Args:
            display_name: File name shown to users
            mime_type: MIME type of the content
            relative_path: Subdirectory of the shared area, e.g. "Download/App"

        Returns:
            The registered StorageEntry

        Raises:
            StorageIndexError: If the name or path is rejected
        """
        self._check_relative(relative_path, display_name)
        relative_path = relative_path.strip("/")
        uri = self._build_uri(relative_path, display_name)

        entry = StorageEntry(
            uri=uri,
            display_name=display_name,
            mime_type=mime_type,
            relative_path=relative_path,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            entry.replaced = uri in self._entries
            self._entries[uri] = entry
            self._save_index()

        if entry.replaced:
            logger.debug(f"Replaced storage entry {uri}")
        else:
            logger.debug(f"Inserted storage entry {uri}")
        return entry

    def get(self, uri: str) -> Optional[StorageEntry]:
        """Get an entry by URI."""
        with self._lock:
            return self._entries.get(uri)

    def list(self, relative_path: Optional[str] = None) -> List[StorageEntry]:
        """List entries, optionally limited to one relative path."""
        with self._lock:
            entries = list(self._entries.values())
        if relative_path:
            entries = [e for e in entries if e.relative_path == relative_path.strip("/")]
        return entries

    def path_for(self, uri: str) -> Path:
        """Get the backing file of an entry.

        Raises:
            StorageIndexError: If the URI is not registered
        """
        entry = self.get(uri)
        if entry is None:
            raise StorageIndexError(f"Unknown storage entry: {uri}", entry_uri=uri)
        return self.root / entry.relative_path / entry.display_name

    def open_output_stream(self, uri: str) -> BinaryIO:
        """Open a registered entry for writing, truncating any old content.

        Raises:
            StorageIndexError: If the URI is unknown or the file cannot be opened
        """
        path = self.path_for(uri)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return open(path, "wb")
        except OSError as e:
            raise StorageIndexError(
                f"Cannot open storage entry for writing: {e}", entry_uri=uri
            ) from e

    def delete(self, uri: str) -> bool:
        """Remove an entry and its content.

        Returns:
            True if the entry existed
        """
        with self._lock:
            entry = self._entries.pop(uri, None)
            if entry is None:
                return False
            self._save_index()

        path = self.root / entry.relative_path / entry.display_name
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        logger.debug(f"Deleted storage entry {uri}")
        return True
