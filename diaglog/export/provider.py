"""File provider indirection for exported files.

External consumers (a share sheet, another app) get a ``content://`` URI
instead of a raw filesystem path. Only files under a registered root can be
addressed:

    provider = FileProvider("diaglog.fileprovider", {"downloads": public_dir})
    provider.uri_for_file(public_dir / "whisper-20260101.log")
    # 'content://diaglog.fileprovider/downloads/whisper-20260101.log'
"""

import logging
from pathlib import Path
from typing import Dict
from urllib.parse import quote, unquote, urlsplit

from diaglog.utils.errors import FileProviderError

logger = logging.getLogger(__name__)

CONTENT_SCHEME = "content"


class FileProvider:
    """Maps files under named roots to content URIs and back."""

    def __init__(self, authority: str, roots: Dict[str, Path]):
        self.authority = authority
        self.roots = {name: Path(path) for name, path in roots.items()}

    def uri_for_file(self, path: Path) -> str:
        """Get the content URI for a file.

        Raises:
            FileProviderError: If the file is not under any registered root
        """
        resolved = Path(path).resolve()
        for name, root in self.roots.items():
            try:
                relative = resolved.relative_to(root.resolve())
            except ValueError:
                continue
            return f"{CONTENT_SCHEME}://{self.authority}/{name}/{quote(relative.as_posix())}"

        raise FileProviderError(
            f"Failed to find configured root that contains {resolved}",
            path=str(resolved),
        )

    def file_for_uri(self, uri: str) -> Path:
        """Resolve a content URI issued by this provider back to its file.

        Raises:
            FileProviderError: If the URI was not issued by this provider
        """
        parts = urlsplit(uri)
        if parts.scheme != CONTENT_SCHEME or parts.netloc != self.authority:
            raise FileProviderError(f"Not a URI of this provider: {uri}")

        name, _, relative = parts.path.lstrip("/").partition("/")
        root = self.roots.get(name)
        if root is None or not relative:
            raise FileProviderError(f"Unknown root in URI: {uri}")

        path = (root / unquote(relative)).resolve()
        try:
            path.relative_to(root.resolve())
        except ValueError:
            raise FileProviderError(f"URI escapes its root: {uri}", path=str(path))
        return path
