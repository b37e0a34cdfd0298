"""
Path discovery for sitescan.

This package finds the files under a scan root, filtered by the built-in
and caller-supplied ignore patterns, either once (scan_once) or as a live
stream of change events (scan_continuous).
"""
from .ignore import DEFAULT_IGNORE_PATTERNS, IgnoreSet, build_ignore_set
from .models import FileEvent, FileEventKind, ScanRequest, SkippedPath
from .walker import PathScanner, scan_once
from .watcher import WatchStream, scan_continuous

__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "IgnoreSet",
    "build_ignore_set",
    "FileEvent",
    "FileEventKind",
    "ScanRequest",
    "SkippedPath",
    "PathScanner",
    "scan_once",
    "WatchStream",
    "scan_continuous",
]
