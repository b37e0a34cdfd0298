# sitescan/cli/interface.py
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import click
import structlog

from sitescan import __version__ as app_version
from sitescan.cli.commands import registry
from sitescan.cli.options import filter_options, root_argument, scan_output_options, watch_options
from sitescan.config.loader import apply_config_sources, load_and_merge_configs
from sitescan.config.settings import OutputFormat, ScanConfig
from sitescan.exceptions import SitescanError
from sitescan.logging_setup import configure_logging

log = structlog.get_logger(__name__)

# flags that only override config-file values when given on the command line.
CLI_OVERRIDABLE_ATTRS = ("use_default_ignores", "follow_symlinks", "absolute_paths", "show_summary")

@dataclass
class CliState:
    # options of the top-level group, shared with every subcommand.
    verbosity: int = 0
    config_profile: Optional[str] = None

def _given_on_command_line(ctx: click.Context, name: str) -> bool:
    return ctx.get_parameter_source(name) == click.core.ParameterSource.COMMANDLINE

def build_scan_config(ctx: click.Context, root: Path, cli_params: Dict[str, Any]) -> ScanConfig:
    # layers dataclass defaults < config files < profile < command line.
    state = ctx.find_object(CliState) or CliState()
    raw_configs_from_toml_files = load_and_merge_configs()
    options = apply_config_sources(raw_configs_from_toml_files, state.config_profile)

    options["root"] = root
    options["verbosity"] = state.verbosity
    options["ignore_patterns"] = list(options.get("ignore_patterns", [])) + list(cli_params.get("ignore_patterns") or ())

    for attr in CLI_OVERRIDABLE_ATTRS:
        if attr in cli_params and _given_on_command_line(ctx, attr):
            options[attr] = cli_params[attr]

    if cli_params.get("output_format_str"):
        options["output_format"] = OutputFormat.from_string(cli_params["output_format_str"])
    if cli_params.get("output_file") is not None:
        options["output_file"] = cli_params["output_file"]
    if cli_params.get("watch_timeout") is not None:
        options["watch_timeout"] = cli_params["watch_timeout"]

    config = ScanConfig(**options)
    log.debug("scan_config_built", root=str(config.root), ignore_patterns=config.ignore_patterns)
    return config

def _run_registered_command(ctx: click.Context, name: str, root: Path, cli_params: Dict[str, Any]):
    try:
        command = registry.resolve(name)
        config = build_scan_config(ctx, root, cli_params)
        log.info("running_command", command=command.name, root=str(config.root))
        exit_code = command.handler(config)
    except click.exceptions.Exit:
        raise
    except SitescanError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
    ctx.exit(exit_code)

@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Emit logs as JSON.")
@click.option("--config-profile", "config_profile", default=None, metavar="NAME", help="Apply a [profiles.NAME] table from the config file(s).")
@click.version_option(version=app_version, prog_name="sitescan", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, verbosity_level: int, force_json_logs: bool, config_profile: Optional[str]):
    """sitescan: find site source files under a directory and watch them for changes."""
    log_level = "warning"
    if verbosity_level == 1:
        log_level = "info"
    elif verbosity_level >= 2:
        log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=force_json_logs)
    ctx.obj = CliState(verbosity=verbosity_level, config_profile=config_profile)
    log.debug("cli_group_invoked", verbosity=verbosity_level, profile=config_profile)

@main_cli_group.command("scan", help=registry.resolve("scan").description)
@root_argument
@filter_options
@scan_output_options
@click.pass_context
def scan_command(ctx: click.Context, root: Path, **cli_params: Any):
    _run_registered_command(ctx, "scan", root, cli_params)

@main_cli_group.command("watch", help=registry.resolve("watch").description)
@root_argument
@filter_options
@watch_options
@click.pass_context
def watch_command(ctx: click.Context, root: Path, **cli_params: Any):
    _run_registered_command(ctx, "watch", root, cli_params)

@main_cli_group.command("commands", help=registry.resolve("commands").description)
@click.pass_context
def commands_command(ctx: click.Context):
    _run_registered_command(ctx, "commands", Path("."), {})
