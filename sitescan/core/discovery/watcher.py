"""
Continuous scanning: an initial enumeration followed by live change events.

The watchdog observer delivers filesystem notifications on its own thread;
they are filtered through the scan's IgnoreSet and handed to the consumer
through a queue. A WatchStream owns the observer and must be closed to
release the OS watch handles.
"""
import os
import queue
import threading
import time
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Union

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from sitescan.core.discovery.ignore import IgnoreSet, build_ignore_set
from sitescan.core.discovery.models import FileEvent, FileEventKind, SkippedPath
from sitescan.core.discovery.path_resolution import resolve_scan_root
from sitescan.core.discovery.walker import walk_matched_files
from sitescan.exceptions import WatchSetupError

log = structlog.get_logger(__name__)

POLL_INTERVAL = 0.25

CLOSE_REASON_CLOSED = "closed"
CLOSE_REASON_ROOT_REMOVED = "root_removed"

# queued by the observer thread when the root directory itself is deleted.
_ROOT_REMOVED = object()

class _ScanEventHandler(FileSystemEventHandler):
    """Translates watchdog events into FileEvents for one root.

    The handler tracks every path it has reported as present. REMOVED is
    only sent for tracked paths, and a directory that leaves the root
    (deleted, or moved outside it) produces REMOVED for each tracked file
    beneath it, since watchdog reports only the directory in that case.
    """

    def __init__(self, root: Path, ignore_set: IgnoreSet, events: "queue.Queue"):
        super().__init__()
        self.root = root
        self.ignore_set = ignore_set
        self.events = events
        self._lock = threading.Lock()
        self._present: Set[Path] = set()

    def _matched(self, raw_path) -> Optional[Path]:
        path = Path(os.fsdecode(raw_path))
        try:
            path.relative_to(self.root)
        except ValueError:
            return None
        if path == self.root or self.ignore_set.excludes(path):
            return None
        return path

    def announce_existing(self, paths: Iterable[Path]) -> int:
        # initial enumeration; paths already reported by a live event are skipped.
        announced = 0
        with self._lock:
            for path in paths:
                if path not in self._present:
                    self._present.add(path)
                    self.events.put(FileEvent(kind=FileEventKind.ADDED, path=path))
                    announced += 1
        return announced

    def _added(self, raw_path):
        path = self._matched(raw_path)
        if path is None:
            return
        with self._lock:
            kind = FileEventKind.CHANGED if path in self._present else FileEventKind.ADDED
            self._present.add(path)
            self.events.put(FileEvent(kind=kind, path=path))

    def _changed(self, raw_path):
        path = self._matched(raw_path)
        if path is None:
            return
        with self._lock:
            self._present.add(path)
            self.events.put(FileEvent(kind=FileEventKind.CHANGED, path=path))

    def _removed(self, raw_path):
        path = Path(os.fsdecode(raw_path))
        with self._lock:
            if path in self._present:
                self._present.discard(path)
                self.events.put(FileEvent(kind=FileEventKind.REMOVED, path=path))

    def _removed_under(self, raw_dir):
        directory = Path(os.fsdecode(raw_dir))
        with self._lock:
            gone = sorted(p for p in self._present if directory in p.parents)
            for path in gone:
                self._present.discard(path)
                self.events.put(FileEvent(kind=FileEventKind.REMOVED, path=path))

    def on_created(self, event: FileSystemEvent):
        if not event.is_directory:
            self._added(event.src_path)

    def on_modified(self, event: FileSystemEvent):
        if not event.is_directory:
            self._changed(event.src_path)

    def on_deleted(self, event: FileSystemEvent):
        if not event.is_directory:
            self._removed(event.src_path)
        elif Path(os.fsdecode(event.src_path)) == self.root:
            self.events.put(_ROOT_REMOVED)
        else:
            self._removed_under(event.src_path)

    def on_moved(self, event: FileSystemEvent):
        # each side of a move is filtered on its own.
        if event.is_directory:
            # files under a directory moved within the root also arrive as
            # their own move events; those find nothing left to remove.
            self._removed_under(event.src_path)
            return
        self._removed(event.src_path)
        self._added(event.dest_path)

class WatchStream:
    """Live, non-restartable stream of FileEvents for one root.

    Iterating blocks until the next event and ends once the stream is
    closed. If the watched root disappears, events already queued are still
    delivered, then the stream closes itself with ``close_reason`` set to
    ``"root_removed"``.
    """

    def __init__(self, root: Path, observer, events: "queue.Queue"):
        self.root = root
        self._observer = observer
        self._events = events
        self._lock = threading.Lock()
        self._closed = False
        self._close_reason: Optional[str] = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def close_reason(self) -> Optional[str]:
        return self._close_reason

    def get(self, timeout: Optional[float] = None) -> Optional[FileEvent]:
        # next event, or None on timeout or once the stream has ended.
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._closed:
            wait = POLL_INTERVAL
            if deadline is not None:
                wait = min(wait, max(0.0, deadline - time.monotonic()))
            try:
                item = self._events.get(timeout=wait)
            except queue.Empty:
                if not self.root.is_dir():
                    self.close(CLOSE_REASON_ROOT_REMOVED)
                    return None
                if deadline is not None and time.monotonic() >= deadline:
                    return None
                continue
            if item is _ROOT_REMOVED:
                self.close(CLOSE_REASON_ROOT_REMOVED)
                return None
            if self._closed:
                return None
            return item
        return None

    def __iter__(self) -> Iterator[FileEvent]:
        while True:
            event = self.get()
            if event is None:
                return
            yield event

    def close(self, reason: str = CLOSE_REASON_CLOSED):
        # stops the observer and joins its threads; safe to call more than once.
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._close_reason = reason
        self._observer.stop()
        if self._observer.is_alive():
            self._observer.join()
        log.info("watch_stream_closed", root=str(self.root), reason=reason)

    def __enter__(self) -> "WatchStream":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        state = f"closed:{self._close_reason}" if self._closed else "open"
        return f"<WatchStream root={str(self.root)!r} {state}>"

def start_watch(
    root: Path,
    ignore_set: IgnoreSet,
    follow_symlinks: bool = False,
    skipped: Optional[List[SkippedPath]] = None,
) -> WatchStream:
    # root must already be resolved; the observer is running before the initial walk.
    events: "queue.Queue" = queue.Queue()
    observer = Observer()
    handler = _ScanEventHandler(root, ignore_set, events)
    try:
        observer.start()
        observer.schedule(handler, str(root), recursive=True)
    except OSError as e:
        observer.stop()
        if observer.is_alive():
            observer.join()
        raise WatchSetupError(f"could not watch {root}: {e}")

    stream = WatchStream(root, observer, events)
    try:
        initial = walk_matched_files(root, ignore_set, follow_symlinks, skipped)
    except BaseException:
        stream.close()
        raise
    announced = handler.announce_existing(initial)
    log.info("watch_started", root=str(root), initial=announced)
    return stream

def scan_continuous(
    root: Union[str, os.PathLike],
    ignore_patterns=(),
    use_default_ignores: bool = True,
    follow_symlinks: bool = False,
) -> WatchStream:
    """Starts watching ``root`` and returns the live event stream.

    The stream first yields an ADDED event for every file present at start,
    then ADDED/CHANGED/REMOVED events as the tree changes. Close it (or use
    it as a context manager) to release the underlying watch.
    """
    abs_root = resolve_scan_root(root)
    ignore_set = build_ignore_set(abs_root, ignore_patterns, use_default_ignores)
    return start_watch(abs_root, ignore_set, follow_symlinks)
