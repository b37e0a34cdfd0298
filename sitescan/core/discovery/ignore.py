from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple
import pathspec
import structlog

from sitescan.exceptions import DiscoveryError

log = structlog.get_logger(__name__)

# patterns with a leading "../" are evaluated against the root's parent.
PARENT_PREFIX = "../"

DEFAULT_IGNORE_PATTERNS: Tuple[str, ...] = (
    # version control metadata
    ".git/",
    ".hg/",
    ".svn/",
    # editor backups
    "*.un~",
    "*~",
    "*.swp",
    # os metadata
    ".DS_Store",
    "Thumbs.db",
    # tooling ignore files
    ".gitignore",
    ".npmignore",
    ".babelrc",
    # lockfiles
    "yarn.lock",
    "package-lock.json",
    "pnpm-lock.yaml",
    "poetry.lock",
    # dependency directories
    "**/bower_components",
    "**/node_modules",
    # build output of sibling projects
    "../**/dist/**",
)

def compile_glob_patterns_to_spec(glob_patterns: Sequence[str]) -> Optional[pathspec.PathSpec]:
    # compiles a list of glob patterns into a pathspec object for matching.
    if not glob_patterns:
        return None
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", glob_patterns)
    except Exception as e:
        raise DiscoveryError(f"error compiling glob patterns {list(glob_patterns)}: {e}")

@dataclass(frozen=True)
class IgnoreSet:
    """Effective ignore patterns for one scan root.

    Paths are matched by their POSIX form relative to ``root``. Directories
    are tested with a trailing slash so directory-only patterns such as
    ``node_modules/`` apply to them.
    """

    root: Path
    patterns: Tuple[str, ...]
    spec: Optional[pathspec.PathSpec]
    parent_spec: Optional[pathspec.PathSpec]

    def matches(self, path: Path, is_dir: bool = False, real_path: Optional[Path] = None) -> bool:
        rel_path = self._relative(path)
        if rel_path is None:
            return False
        if self.spec is not None and rel_path != "." and self.spec.match_file(self._as_match_str(rel_path, is_dir)):
            return True
        if real_path is not None:
            return self._matches_outside_root(real_path, is_dir)
        return False

    def excludes(self, path: Path, is_dir: bool = False) -> bool:
        # true when the path or any directory between it and root is ignored.
        rel_path = self._relative(path)
        if rel_path is None or rel_path == ".":
            return False
        parts = Path(rel_path).parts
        for depth in range(1, len(parts)):
            if self.matches(self.root.joinpath(*parts[:depth]), is_dir=True):
                return True
        return self.matches(path, is_dir=is_dir)

    def _relative(self, path: Path) -> Optional[str]:
        path = Path(path)
        if not path.is_absolute():
            return path.as_posix()
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return None

    def _matches_outside_root(self, real_path: Path, is_dir: bool) -> bool:
        if self.parent_spec is None:
            return False
        try:
            real_path.relative_to(self.root)
            return False
        except ValueError:
            pass
        try:
            rel_to_parent = real_path.relative_to(self.root.parent).as_posix()
        except ValueError:
            return False
        return self.parent_spec.match_file(self._as_match_str(rel_to_parent, is_dir))

    @staticmethod
    def _as_match_str(rel_path: str, is_dir: bool) -> str:
        return f"{rel_path}/" if is_dir else rel_path

def build_ignore_set(
    root: Path,
    ignore_patterns: Iterable[str] = (),
    use_default_ignores: bool = True,
) -> IgnoreSet:
    # default patterns first, caller patterns after so "!" negations can re-include.
    caller_patterns = tuple(ignore_patterns or ())
    for pattern in caller_patterns:
        if not isinstance(pattern, str):
            raise DiscoveryError(f"ignore patterns must be strings, got {pattern!r}")

    effective = (DEFAULT_IGNORE_PATTERNS if use_default_ignores else ()) + caller_patterns
    in_root = [p for p in effective if not p.startswith(PARENT_PREFIX)]
    parent = [p[len(PARENT_PREFIX):] for p in effective if p.startswith(PARENT_PREFIX)]

    ignore_set = IgnoreSet(
        root=root,
        patterns=effective,
        spec=compile_glob_patterns_to_spec(in_root),
        parent_spec=compile_glob_patterns_to_spec(parent),
    )
    log.debug(
        "ignore_set_built",
        root=str(root),
        default_count=len(effective) - len(caller_patterns),
        caller_count=len(caller_patterns),
    )
    return ignore_set
