"""Closed set of diagnostics streams."""

from enum import Enum
from typing import Any, Optional


class DiagnosticsStream(str, Enum):
    """Independent diagnostics log streams known at process start."""

    WHISPER = "whisper"
    THEME = "theme"

    @classmethod
    def from_name(cls, name: Any) -> Optional["DiagnosticsStream"]:
        """Get a stream by member name ("WHISPER"), None for anything else."""
        if not isinstance(name, str) or not name.strip():
            return None
        return cls.__members__.get(name)


DEFAULT_STREAM = DiagnosticsStream.WHISPER
