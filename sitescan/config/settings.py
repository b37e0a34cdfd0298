from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional
import structlog

log = structlog.get_logger(__name__)

class ScanMode(Enum):
    # one-shot traversal or a live watch.
    ONE_SHOT = "one_shot"
    WATCH = "watch"

class OutputFormat(Enum):
    # how matched paths are written by the scan command.
    LINES = "lines"
    NUL = "nul"
    JSON = "json"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["OutputFormat"]:
        if not s:
            return None
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_output_format_string", input_string=s)
            return None

DEFAULT_OUTPUT_FORMAT = OutputFormat.LINES

@dataclass
class ScanConfig:
    # holds all configuration parameters for a single command invocation.
    root: Path = field(default_factory=lambda: Path("."))
    ignore_patterns: List[str] = field(default_factory=list)
    use_default_ignores: bool = True
    follow_symlinks: bool = False
    output_format: OutputFormat = DEFAULT_OUTPUT_FORMAT
    output_file: Optional[Path] = None
    absolute_paths: bool = False
    show_summary: bool = False
    watch_timeout: Optional[float] = None
    verbosity: int = 0

    # internal state, not set directly by user flags.
    base_dir: Path = field(init=False)

    def __post_init__(self):
        # performs initial setup after dataclass instantiation.
        self.base_dir = Path.cwd().resolve()
        if isinstance(self.root, str):
            self.root = Path(self.root)
        if isinstance(self.output_format, str):
            self.output_format = OutputFormat.from_string(self.output_format) or DEFAULT_OUTPUT_FORMAT
