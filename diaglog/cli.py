"""Click CLI for diaglog.

Commands:
- streams: List diagnostics streams and their mirror files
- log: Write lines to a stream
- mask: Show the masked form of a text
- tail: Show the end of a stream's mirror file
- export: Export a stream's logs
- share: Export and share a stream's logs
- save: Export and save a stream's logs
- notify: Post an error notification with log actions
- entries: List managed storage entries
"""

import logging
import sys
from collections import deque
from pathlib import Path
from typing import Optional, Tuple

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from diaglog import __version__
from diaglog.actions import (
    Action,
    ActionRouter,
    ConsoleNotificationSink,
    ConsoleNotifier,
    ConsoleShareSheet,
    DiagnosticsNotifier,
)
from diaglog.channels import DiagnosticsStream
from diaglog.channels.registry import CHANNEL_SPECS, ChannelRegistry
from diaglog.config import DiagnosticsSettings
from diaglog.utils.log import setup_logging

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_BASE_DIR = Path.home() / ".diaglog"

STREAM_NAMES = [stream.name for stream in DiagnosticsStream]


def _stream_arg(name: str) -> DiagnosticsStream:
    return DiagnosticsStream[name.upper()]


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--base-dir",
    envvar="DIAGLOG_HOME",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_BASE_DIR,
    show_default=True,
    help="Directory holding mirror files, exports and managed storage",
)
@click.option(
    "--managed-storage/--legacy-storage",
    envvar="DIAGLOG_MANAGED_STORAGE",
    default=False,
    help="Export through managed storage instead of the legacy shared directory",
)
@click.option("--app-name", envvar="DIAGLOG_APP_NAME", default="diaglog", help="App name used in export paths")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--echo", is_flag=True, help="Echo channel lines to the log output")
@click.pass_context
def cli(ctx, base_dir: Path, managed_storage: bool, app_name: str, debug: bool, echo: bool):
    """diaglog - Bounded, masked diagnostics logs with export."""
    level = "DEBUG" if debug else "INFO"
    setup_logging(level=level, echo_channels=echo)

    try:
        settings = DiagnosticsSettings.for_base_dir(
            base_dir,
            managed_storage=managed_storage,
            app_name=app_name,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e))

    registry = ChannelRegistry(
        settings,
        notifier=ConsoleNotifier(console),
        share_sheet=ConsoleShareSheet(console),
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["registry"] = registry
    ctx.obj["router"] = ActionRouter(registry)


@cli.command()
@click.pass_context
def streams(ctx):
    """List diagnostics streams."""
    registry: ChannelRegistry = ctx.obj["registry"]

    table = Table(title="Diagnostics Streams")
    table.add_column("Stream")
    table.add_column("Tag")
    table.add_column("Masked")
    table.add_column("Capacity", justify="right")
    table.add_column("Mirror file")
    table.add_column("Size", justify="right")

    for stream in DiagnosticsStream:
        channel = registry.channel(stream)
        spec = CHANNEL_SPECS[stream]
        size = channel.mirror_path.stat().st_size if channel.mirror_path.exists() else 0
        table.add_row(
            stream.name,
            spec.tag,
            "yes" if channel.masked else "no",
            str(channel.capacity),
            escape(str(channel.mirror_path)),
            f"{size}B",
        )

    console.print(table)


@cli.command()
@click.argument("stream", type=click.Choice(STREAM_NAMES, case_sensitive=False))
@click.argument("message", nargs=-1)
@click.pass_context
def log(ctx, stream: str, message: Tuple[str, ...]):
    """Write a line to STREAM (reads lines from stdin when no MESSAGE)."""
    registry: ChannelRegistry = ctx.obj["registry"]
    channel = registry.channel(_stream_arg(stream))

    if message:
        lines = [" ".join(message)]
    else:
        lines = [line.rstrip("\n") for line in sys.stdin]

    failed = 0
    for line in lines:
        if not channel.write(line).written:
            failed += 1

    console.print(f"Wrote {len(lines)} line(s) to {channel.tag}")
    if failed:
        console.print(f"[yellow]{failed} line(s) kept in memory only (mirror file not writable)[/]")


@cli.command()
@click.argument("text")
@click.pass_context
def mask(ctx, text: str):
    """Show TEXT the way it would appear in a notice."""
    registry: ChannelRegistry = ctx.obj["registry"]
    click.echo(registry.channel(DiagnosticsStream.WHISPER).mask_for_display(text))


@cli.command()
@click.argument("stream", type=click.Choice(STREAM_NAMES, case_sensitive=False))
@click.option("-n", "--lines", "count", type=int, default=20, show_default=True, help="Lines to show")
@click.pass_context
def tail(ctx, stream: str, count: int):
    """Show the last lines of STREAM's mirror file."""
    registry: ChannelRegistry = ctx.obj["registry"]
    channel = registry.channel(_stream_arg(stream))

    if not channel.mirror_path.exists():
        console.print(f"[yellow]No log file for {stream}[/]")
        return

    with open(channel.mirror_path, encoding="utf-8", errors="replace") as f:
        last = deque(f, maxlen=max(count, 0))
    for line in last:
        click.echo(line.rstrip("\n"))


@cli.command()
@click.argument("stream", type=click.Choice(STREAM_NAMES, case_sensitive=False))
@click.pass_context
def export(ctx, stream: str):
    """Export STREAM's logs and print the resulting location."""
    registry: ChannelRegistry = ctx.obj["registry"]
    result = registry.channel(_stream_arg(stream)).export()

    if not result:
        console.print(f"[red]Export failed[/] - {escape(result.reason)}")
        ctx.exit(1)

    console.print(f"[green]Exported[/] {escape(result.handle.display_name)}")
    console.print(f"  URI:  {escape(result.handle.uri)}")
    console.print(f"  File: {escape(str(result.handle.path))}")


def _dispatch(ctx, action: Action, stream: Optional[str]) -> None:
    router: ActionRouter = ctx.obj["router"]
    result = router.dispatch(action, stream.upper() if stream else stream)
    if not result:
        ctx.exit(1)


@cli.command()
@click.option("--stream", help="Stream name (unknown names use the default stream)")
@click.pass_context
def share(ctx, stream: Optional[str]):
    """Export a stream's logs and offer them for sharing."""
    _dispatch(ctx, Action.SHARE, stream)


@cli.command()
@click.option("--stream", help="Stream name (unknown names use the default stream)")
@click.pass_context
def save(ctx, stream: Optional[str]):
    """Export a stream's logs to the downloads location."""
    _dispatch(ctx, Action.SAVE, stream)


@cli.command()
@click.argument("title")
@click.argument("text")
@click.pass_context
def notify(ctx, title: str, text: str):
    """Post an error notification with log actions."""
    registry: ChannelRegistry = ctx.obj["registry"]
    DiagnosticsNotifier(registry, ConsoleNotificationSink(console)).show_error(title, text)


@cli.command()
@click.pass_context
def entries(ctx):
    """List managed storage entries."""
    registry: ChannelRegistry = ctx.obj["registry"]
    settings: DiagnosticsSettings = ctx.obj["settings"]
    items = registry.storage_index.list(settings.relative_path)

    if not items:
        console.print("[yellow]No managed storage entries[/]")
        return

    table = Table(title=f"Managed Storage ({len(items)})")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Created")
    table.add_column("URI", style="dim")

    for entry in items:
        table.add_row(entry.display_name, entry.mime_type, entry.created_at, escape(entry.uri))

    console.print(table)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
