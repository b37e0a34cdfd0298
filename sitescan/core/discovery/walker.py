import os
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union
import structlog

from sitescan.config.settings import ScanMode
from sitescan.core.discovery.ignore import IgnoreSet, build_ignore_set
from sitescan.core.discovery.models import ScanRequest, SkippedPath
from sitescan.core.discovery.path_resolution import resolve_scan_root

log = structlog.get_logger(__name__)

def walk_matched_files(
    root: Path,
    ignore_set: IgnoreSet,
    follow_symlinks: bool = False,
    skipped: Optional[List[SkippedPath]] = None,
) -> List[Path]:
    # walks a resolved root, pruning ignored directories, and collects regular files.
    matched: List[Path] = []
    seen_files: Set[Path] = set()
    visited_dirs: Set[str] = {os.path.realpath(root)}

    def _on_walk_error(error: OSError):
        path = Path(error.filename) if error.filename else root
        log.warning("directory_unreadable_skipped", path=str(path), error=error.strerror or str(error))
        if skipped is not None:
            skipped.append(SkippedPath(path=path, reason=error.strerror or str(error)))

    for dirpath, dirs, files in os.walk(str(root), topdown=True, onerror=_on_walk_error, followlinks=follow_symlinks):
        # prune directories.
        kept_dirs = []
        for d in dirs:
            dir_path = Path(dirpath, d)
            real_dir = os.path.realpath(dir_path) if follow_symlinks else None
            if ignore_set.matches(dir_path, is_dir=True, real_path=Path(real_dir) if real_dir else None):
                continue
            if real_dir is not None:
                # symlink loops
                if real_dir in visited_dirs:
                    continue
                visited_dirs.add(real_dir)
            kept_dirs.append(d)
        dirs[:] = kept_dirs

        for file_name in files:
            file_path = Path(dirpath, file_name)
            if not file_path.is_file():
                continue
            real_file = file_path.resolve() if follow_symlinks else None
            if ignore_set.matches(file_path, real_path=real_file):
                continue
            if file_path not in seen_files:
                seen_files.add(file_path)
                matched.append(file_path)

    matched.sort()
    return matched

class PathScanner:
    """Enumerates the files under one root, once or continuously.

    A scanner is bound to a single immutable ScanRequest. ``skipped`` lists
    the unreadable directories encountered by the most recent traversal.
    """

    def __init__(self, request: ScanRequest):
        self.request = request
        self.skipped: List[SkippedPath] = []
        self.log = structlog.get_logger(self.__class__.__name__)

    def _prepare(self):
        root = resolve_scan_root(self.request.root)
        ignore_set = build_ignore_set(root, self.request.ignore_patterns, self.request.use_default_ignores)
        return root, ignore_set

    def scan_once(self) -> List[Path]:
        root, ignore_set = self._prepare()
        self.log.info("scan_started", root=str(root), patterns=len(ignore_set.patterns))
        self.skipped = []
        matched = walk_matched_files(root, ignore_set, self.request.follow_symlinks, self.skipped)
        self.log.info("scan_complete", root=str(root), matched=len(matched), skipped=len(self.skipped))
        return matched

    def scan_continuous(self):
        from sitescan.core.discovery.watcher import start_watch

        root, ignore_set = self._prepare()
        self.skipped = []
        return start_watch(root, ignore_set, self.request.follow_symlinks, self.skipped)

    def run(self):
        # dispatches on the request's mode.
        if self.request.mode == ScanMode.WATCH:
            return self.scan_continuous()
        return self.scan_once()

def scan_once(
    root: Union[str, os.PathLike],
    ignore_patterns: Iterable[str] = (),
    use_default_ignores: bool = True,
    follow_symlinks: bool = False,
) -> List[Path]:
    """Returns every non-ignored regular file under ``root`` as absolute paths.

    Raises RootNotFoundError or RootPermissionError when the root itself
    cannot be read. Unreadable subdirectories are skipped and logged.
    """
    request = ScanRequest(
        root=Path(root),
        ignore_patterns=tuple(ignore_patterns or ()),
        mode=ScanMode.ONE_SHOT,
        use_default_ignores=use_default_ignores,
        follow_symlinks=follow_symlinks,
    )
    return PathScanner(request).scan_once()
