from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Tuple

from sitescan.config.settings import ScanMode

class FileEventKind(Enum):
    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"

@dataclass(frozen=True)
class FileEvent:
    kind: FileEventKind
    path: Path

@dataclass(frozen=True)
class SkippedPath:
    # a descendant that could not be read during traversal.
    path: Path
    reason: str

@dataclass(frozen=True)
class ScanRequest:
    # immutable description of one scan; patterns are stored as a tuple.
    root: Path
    ignore_patterns: Tuple[str, ...] = field(default_factory=tuple)
    mode: ScanMode = ScanMode.ONE_SHOT
    use_default_ignores: bool = True
    follow_symlinks: bool = False

    def __post_init__(self):
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(self, "ignore_patterns", tuple(self.ignore_patterns or ()))
