"""
Console feedback for the CLI: watch events on stdout, summaries on stderr.
"""
import click
import structlog
from rich.console import Console as RichConsole
from rich.text import Text

from sitescan.core.discovery.models import FileEventKind
from sitescan.core.output import display_path

log = structlog.get_logger(__name__)

EVENT_STYLES = {
    FileEventKind.ADDED: "green",
    FileEventKind.CHANGED: "yellow",
    FileEventKind.REMOVED: "red",
}

class WatchEventPrinter:
    # one line per event, kind padded so paths line up.

    def __init__(self, config, console=None):
        self.config = config
        self.console = console or RichConsole(highlight=False)
        self.counts = {kind: 0 for kind in FileEventKind}

    def print_event(self, event):
        self.counts[event.kind] += 1
        shown = display_path(event.path, self.config.base_dir, self.config.absolute_paths)
        line = Text.assemble((f"{event.kind.value:<8}", EVENT_STYLES[event.kind]), shown)
        self.console.print(line, soft_wrap=True)

def print_scan_summary(matched_count: int, skipped):
    click.secho("--- scan summary ---", fg="cyan", err=True)
    click.echo(f"Matched files: {matched_count}", err=True)
    if skipped:
        click.secho(f"Skipped unreadable directories: {len(skipped)}", fg="yellow", err=True)
        for entry in skipped:
            click.echo(f"  {entry.path}: {entry.reason}", err=True)

def print_watch_summary(printer: WatchEventPrinter, close_reason):
    counts = ", ".join(f"{kind.value} {n}" for kind, n in printer.counts.items())
    click.secho(f"--- watch stopped ({close_reason or 'closed'}) ---", fg="cyan", err=True)
    click.echo(f"Events: {counts}", err=True)
