# sitescan/__init__.py
"""sitescan: find site source files and watch them for changes."""

__version__ = "0.3.0"

from sitescan.core.discovery import (
    FileEvent,
    FileEventKind,
    PathScanner,
    WatchStream,
    scan_continuous,
    scan_once,
)

__all__ = [
    "__version__",
    "FileEvent",
    "FileEventKind",
    "PathScanner",
    "WatchStream",
    "scan_continuous",
    "scan_once",
]
