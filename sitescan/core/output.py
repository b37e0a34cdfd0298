import json
import sys
from pathlib import Path
from typing import Iterable, Optional
import structlog

from sitescan.config.settings import OutputFormat
from sitescan.exceptions import OutputError

log = structlog.get_logger(__name__)

def display_path(path: Path, base_dir: Optional[Path], absolute: bool = False) -> str:
    # relative to base_dir when the path lives under it, else absolute.
    if absolute or base_dir is None:
        return str(path)
    try:
        return str(path.relative_to(base_dir))
    except ValueError:
        return str(path)

def format_paths(
    paths: Iterable[Path],
    output_format: OutputFormat,
    base_dir: Optional[Path] = None,
    absolute: bool = False,
) -> str:
    shown = [display_path(p, base_dir, absolute) for p in paths]
    if output_format == OutputFormat.JSON:
        return json.dumps({"count": len(shown), "paths": shown}, indent=2) + "\n"
    if output_format == OutputFormat.NUL:
        return "".join(f"{p}\0" for p in shown)
    return "".join(f"{p}\n" for p in shown)

def write_to_stdout(text_content: str):
    # writes text to standard output.
    try:
        sys.stdout.write(text_content)
        sys.stdout.flush()
    except UnicodeEncodeError as e:
        log.warning("stdout_write_failed_trying_binary_fallback", error=str(e))
        sys.stdout.buffer.write(text_content.encode("utf-8", errors="replace"))
        sys.stdout.buffer.flush()

def write_to_file(output_file_path: Path, text_content: str):
    # writes text content to the specified file path.
    log.info("writing_output_to_file", path=str(output_file_path))
    try:
        output_file_path.write_text(text_content, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"failed to write to file '{output_file_path}': {e}")
