"""Error hierarchy for diaglog.

Export steps raise these; the export strategies catch them at their boundary
and turn them into a failed ExportResult. None of them escape a channel.
"""

from typing import Optional


class DiagnosticsError(Exception):
    """Base exception for all diaglog errors."""

    pass


class ExportError(DiagnosticsError):
    """Raised when a step of a log export fails."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage


class StorageIndexError(ExportError):
    """Raised when the managed storage index rejects an operation."""

    def __init__(
        self,
        message: str,
        entry_uri: Optional[str] = None,
        stage: str = "storage_index",
    ):
        super().__init__(message, stage)
        self.entry_uri = entry_uri


class FileProviderError(ExportError):
    """Raised when a file cannot be addressed through the file provider."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, stage="file_provider")
        self.path = path


class PublicDirectoryUnavailable(ExportError):
    """Raised when the app-scoped public directory cannot be resolved."""

    def __init__(self, message: str = "Public export directory unavailable"):
        super().__init__(message, stage="public_dir")
