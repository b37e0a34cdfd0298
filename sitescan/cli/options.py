# sitescan/cli/options.py
"""
Reusable groups of Click options for the sitescan commands.
Uses click_option_group for better help message formatting.
"""
import click
from click_option_group import optgroup
from pathlib import Path

from sitescan.config.settings import OutputFormat, DEFAULT_OUTPUT_FORMAT

def _apply(decorators, func):
    # applies decorators in the order they would be stacked in source.
    for decorator in reversed(decorators):
        func = decorator(func)
    return func

def root_argument(func):
    return click.argument("root", required=False, default=".", type=click.Path(path_type=Path))(func)

def filter_options(func):
    """Ignore-pattern and traversal options shared by scan and watch."""
    return _apply([
        optgroup.group("Filtering Options", help="Control which files and directories are reported."),
        optgroup.option("-e", "--ignore", "ignore_patterns", multiple=True, metavar="GLOB", help="Glob pattern to ignore, relative to ROOT. Repeatable."),
        optgroup.option("--default-ignores/--no-default-ignores", "use_default_ignores", default=True, help="Apply the built-in ignore set (VCS metadata, lockfiles, node_modules, ...). Default: on."),
        optgroup.option("-L", "--follow-symlinks", "follow_symlinks", is_flag=True, default=False, help="Descend into symlinked directories."),
        optgroup.option("--absolute-paths", "absolute_paths", is_flag=True, default=False, help="Print absolute paths instead of paths relative to the current directory."),
    ], func)

def scan_output_options(func):
    return _apply([
        optgroup.group("Output Options", help="Where and how matched paths are written."),
        optgroup.option("-F", "--format", "output_format_str", type=click.Choice([f.value for f in OutputFormat]), default=None, help=f"Output format. Default: {DEFAULT_OUTPUT_FORMAT.value}."),
        optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Write matched paths to this file instead of stdout."),
        optgroup.option("--summary", "show_summary", is_flag=True, default=False, help="Print a count of matched files and skipped directories on stderr."),
    ], func)

def watch_options(func):
    return _apply([
        optgroup.group("Watch Options", help="Lifetime of the watch session."),
        optgroup.option("--exit-after", "watch_timeout", type=click.FloatRange(min=0), default=None, metavar="SECONDS", help="Stop watching after this many seconds. Default: run until interrupted."),
    ], func)
