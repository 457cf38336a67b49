"""Log record model and line format."""

from dataclasses import dataclass
from datetime import datetime


def format_timestamp(moment: datetime) -> str:
    """Format a wall-clock time as ``HH:MM:SS.mmm``."""
    return moment.strftime("%H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


@dataclass(frozen=True)
class LogRecord:
    """One masked line held by a channel."""

    timestamp: datetime
    text: str

    @property
    def line(self) -> str:
        """Rendered form, as written to the mirror file."""
        return f"[{format_timestamp(self.timestamp)}] {self.text}"

    def __str__(self) -> str:
        return self.line
