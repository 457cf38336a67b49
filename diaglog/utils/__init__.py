"""Utility modules for diaglog."""

from .errors import (
    DiagnosticsError,
    ExportError,
    StorageIndexError,
    FileProviderError,
    PublicDirectoryUnavailable,
)
from .log import setup_logging

__all__ = [
    "DiagnosticsError",
    "ExportError",
    "StorageIndexError",
    "FileProviderError",
    "PublicDirectoryUnavailable",
    "setup_logging",
]
