"""Export outcome types."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ExportKind(str, Enum):
    """Which export strategy produced a handle."""

    MANAGED_STORAGE = "managed_storage"
    LEGACY_SHARED_FILE = "legacy_shared_file"


@dataclass(frozen=True)
class ExportHandle:
    """Locatable reference to an exported log file.

    External consumers address the export through ``uri``; ``path`` is the
    backing file and is only meaningful inside the process.
    """

    uri: str
    display_name: str
    path: Path
    kind: ExportKind


@dataclass(frozen=True)
class ExportResult:
    """Either a handle to the exported file or a failure with no handle."""

    handle: Optional[ExportHandle] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.handle is not None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, handle: ExportHandle) -> "ExportResult":
        return cls(handle=handle)

    @classmethod
    def failure(cls, reason: str) -> "ExportResult":
        return cls(handle=None, reason=reason)
