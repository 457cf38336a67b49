"""Action routing and user-facing delivery for diagnostics logs."""

from .router import Action, ActionRouter, EXTRA_STREAM
from .notifications import DiagnosticsNotifier
from .console import ConsoleNotifier, ConsoleShareSheet, ConsoleNotificationSink

__all__ = [
    "Action",
    "ActionRouter",
    "EXTRA_STREAM",
    "DiagnosticsNotifier",
    "ConsoleNotifier",
    "ConsoleShareSheet",
    "ConsoleNotificationSink",
]
