# sitescan/cli/commands.py
"""
Command table for the sitescan CLI.

Handlers are registered here at import time and looked up by name; each
one receives the fully layered ScanConfig for its invocation and returns
a process exit code.
"""
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List

import click
import structlog

from sitescan.cli.console_output import WatchEventPrinter, print_scan_summary, print_watch_summary
from sitescan.config.settings import ScanConfig, ScanMode
from sitescan.core.discovery import PathScanner, ScanRequest
from sitescan.core.discovery.watcher import CLOSE_REASON_ROOT_REMOVED
from sitescan.core.output import format_paths, write_to_file, write_to_stdout
from sitescan.exceptions import CommandError

log = structlog.get_logger(__name__)

Handler = Callable[[ScanConfig], int]

@dataclass(frozen=True)
class Command:
    name: str
    description: str
    handler: Handler

class CommandRegistry:
    """Name -> Command table, filled once at startup."""

    def __init__(self):
        self._commands: Dict[str, Command] = {}

    def register(self, name: str, description: str):
        def decorator(handler: Handler) -> Handler:
            if name in self._commands:
                raise CommandError(f"command '{name}' is already registered")
            self._commands[name] = Command(name=name, description=description, handler=handler)
            return handler
        return decorator

    def resolve(self, name: str) -> Command:
        try:
            return self._commands[name]
        except KeyError:
            raise CommandError(f"unknown command '{name}'. Available: {', '.join(self.names())}")

    def names(self) -> List[str]:
        return sorted(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands[name] for name in self.names())

registry = CommandRegistry()

def request_from_config(config: ScanConfig, mode: ScanMode) -> ScanRequest:
    return ScanRequest(
        root=config.root,
        ignore_patterns=tuple(config.ignore_patterns),
        mode=mode,
        use_default_ignores=config.use_default_ignores,
        follow_symlinks=config.follow_symlinks,
    )

@registry.register("scan", "List every non-ignored file under ROOT once.")
def run_scan(config: ScanConfig) -> int:
    scanner = PathScanner(request_from_config(config, ScanMode.ONE_SHOT))
    matched = scanner.run()
    rendered = format_paths(matched, config.output_format, config.base_dir, config.absolute_paths)

    if config.output_file:
        write_to_file(config.output_file, rendered)
        click.echo(f"Info: {len(matched)} paths written to: {config.output_file}", err=True)
    else:
        write_to_stdout(rendered)

    if config.show_summary:
        print_scan_summary(len(matched), scanner.skipped)
    return 0

@registry.register("watch", "Report files under ROOT, then stream changes until interrupted.")
def run_watch(config: ScanConfig) -> int:
    stream = PathScanner(request_from_config(config, ScanMode.WATCH)).run()
    printer = WatchEventPrinter(config)
    deadline = None if config.watch_timeout is None else time.monotonic() + config.watch_timeout

    try:
        with stream:
            while not stream.closed:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    break
                event = stream.get(timeout=remaining)
                if event is not None:
                    printer.print_event(event)
    except KeyboardInterrupt:
        log.info("watch_interrupted_by_user", root=str(stream.root))

    if stream.close_reason == CLOSE_REASON_ROOT_REMOVED:
        click.secho(f"Watched root was removed: {stream.root}", fg="yellow", err=True)
    if config.verbosity > 0:
        print_watch_summary(printer, stream.close_reason)
    return 0

@registry.register("commands", "List the available commands.")
def run_list_commands(config: ScanConfig) -> int:
    width = max(len(name) for name in registry.names())
    for command in registry:
        click.echo(f"{command.name:<{width}}  {command.description}")
    return 0
