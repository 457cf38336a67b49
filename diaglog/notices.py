"""User-facing collaborators of the logging core.

The core never renders anything itself. It hands short notices, share
requests and notifications to these interfaces; the embedding application
(or the console versions in diaglog.actions.console) implements them.
"""

from dataclasses import dataclass, field
from typing import List, Protocol

from diaglog.export.result import ExportHandle


@dataclass(frozen=True)
class DiagnosticsStrings:
    """User-visible texts of one channel."""

    share_action: str
    save_action: str
    share_title: str
    unavailable_message: str
    export_success: str
    export_saved_legacy: str
    export_failed: str


@dataclass(frozen=True)
class NotificationAction:
    """A button on a notification that re-enters the action router."""

    label: str
    action: str  # wire name, e.g. "diaglog.action.SHARE"
    stream: str  # DiagnosticsStream name


@dataclass(frozen=True)
class Notification:
    """An error notification with masked text and log actions."""

    title: str
    summary: str
    body: str
    actions: List[NotificationAction] = field(default_factory=list)


class Notifier(Protocol):
    """Shows a short, transient notice (toast)."""

    def notify(self, message: str) -> None: ...


class ShareSheet(Protocol):
    """Offers an exported file to other applications."""

    def share(self, handle: ExportHandle, mime_type: str, title: str) -> None: ...


class NotificationSink(Protocol):
    """Posts a notification for the user."""

    def post(self, notification: Notification) -> None: ...
