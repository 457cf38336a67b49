"""Terminal renditions of the user-facing collaborators."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from diaglog.export.result import ExportHandle
from diaglog.notices import Notification


class ConsoleNotifier:
    """Prints notices as single status lines."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def notify(self, message: str) -> None:
        self.console.print(f"[bold cyan]»[/] {escape(message)}")


class ConsoleShareSheet:
    """Shows where an exported file can be picked up."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def share(self, handle: ExportHandle, mime_type: str, title: str) -> None:
        table = Table(show_header=False, box=None)
        table.add_column(style="dim")
        table.add_column()
        table.add_row("URI", escape(handle.uri))
        table.add_row("File", escape(str(handle.path)))
        table.add_row("Type", mime_type)
        table.add_row("Via", handle.kind.value)
        self.console.print(Panel(table, title=escape(title), border_style="green"))


class ConsoleNotificationSink:
    """Prints notifications with their action buttons."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def post(self, notification: Notification) -> None:
        buttons = "  ".join(
            f"[reverse] {escape(a.label)} [/] [dim]{a.action} {a.stream}[/]"
            for a in notification.actions
        )
        self.console.print(
            Panel(
                f"{escape(notification.body)}\n\n{buttons}",
                title=f"[bold red]{escape(notification.title)}[/]",
                border_style="red",
            )
        )
