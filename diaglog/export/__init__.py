"""Export of channel mirror files to durable, shareable locations.

Two strategies are supported, chosen per call by ExportSelector:

1. Managed storage (ManagedStorageExport):
   - Registers an entry in an indexed shared storage area first
   - Used when the platform offers such an index

2. Legacy shared file (LegacySharedFileExport):
   - Plain copy into an app-scoped public directory
   - Addressed through FileProvider content URIs
"""

from .result import ExportHandle, ExportKind, ExportResult
from .storage import FileSystemStorageIndex, ManagedStorageIndex, StorageEntry
from .provider import FileProvider
from .strategies import (
    ExportSelector,
    ExportStrategy,
    LegacySharedFileExport,
    ManagedStorageExport,
    export_file_name,
    EXPORT_MIME_TYPE,
)

__all__ = [
    "ExportHandle",
    "ExportKind",
    "ExportResult",
    "FileSystemStorageIndex",
    "ManagedStorageIndex",
    "StorageEntry",
    "FileProvider",
    "ExportSelector",
    "ExportStrategy",
    "LegacySharedFileExport",
    "ManagedStorageExport",
    "export_file_name",
    "EXPORT_MIME_TYPE",
]
