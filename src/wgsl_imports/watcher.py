# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Watch mode: re-resolve entry points when their shader files change.

Monitors the project root with watchdog. A change to a `.wgsl` file
re-resolves every entry point that depends on it: the entry itself or any
module in its last import order. Entry points whose last pass failed are
re-resolved on any `.wgsl` change, since a new or fixed file may repair them.

Every re-resolution is an independent pass; results (or the error that
ended the pass) go to registered callbacks.

Thread Safety:
- Callbacks run on the watchdog observer thread
- The per-entry dependents table is guarded by a lock
"""

import fnmatch
import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Set, Union

from watchdog.events import FileMovedEvent, FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import ImportResolutionError, InvariantViolation
from .files import WGSL_EXTENSION
from .logging_setup import entry_context
from .service import ImportResolutionService, ResolvedImports

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)

# Outcome of one pass: the result, a recoverable error, or a fatal one
PassResult = Union[ResolvedImports, ImportResolutionError, InvariantViolation]

# Callback signature: (entry, result of the pass) -> None
ResolutionCallback = Callable[[str, PassResult], None]


class ImportGraphWatcher:
    """Re-resolves entry points whenever one of their files changes.

    Usage:
        watcher = ImportGraphWatcher(service, ["main.wgsl"])
        watcher.register_callback(print_result)
        watcher.resolve_all()
        watcher.start()
        # ...
        watcher.stop()
    """

    # Directories never worth watching
    ALWAYS_IGNORED = {
        ".git",
        "node_modules",
        "target",
        ".venv",
        "venv",
        "__pycache__",
    }

    def __init__(
        self,
        service: ImportResolutionService,
        entries: Iterable[str],
        ignore_patterns: Optional[Iterable[str]] = None,
    ):
        """Initialize watcher.

        Args:
            service: Service used for every resolution pass.
            entries: Entry points, relative to the project root.
            ignore_patterns: Glob patterns (relative path or file name) to ignore.
                Defaults to the service configuration.
        """
        self.service = service
        self.project_root = service.project_root
        self.entries: List[str] = list(entries)
        if ignore_patterns is None:
            ignore_patterns = service.config.watch_ignore_patterns
        self.ignore_patterns: Set[str] = set(ignore_patterns)

        # entry -> canonical paths of its last successful pass, None after a failure
        self._dependents: Dict[str, Optional[Set[Path]]] = {entry: None for entry in self.entries}
        self._lock = threading.Lock()
        self._callbacks: List[ResolutionCallback] = []

        self._observer: Optional["BaseObserver"] = None
        self._event_handler = _ShaderEventHandler(self)

        logger.info(f"ImportGraphWatcher initialized for {len(self.entries)} entry point(s)")

    def register_callback(self, callback: ResolutionCallback) -> None:
        """Register a callback receiving every pass result."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)
            logger.debug(f"Registered resolution callback: {callback}")

    def unregister_callback(self, callback: ResolutionCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)
            logger.debug(f"Unregistered resolution callback: {callback}")

    def _notify(self, entry: str, result: PassResult) -> None:
        for callback in self._callbacks:
            try:
                callback(entry, result)
            except Exception as e:
                # One failing callback must not stop the others or the watcher
                logger.error(
                    f"Resolution callback failed for {entry}: {e}", extra=entry_context(entry)
                )

    def should_ignore(self, file_path: Union[str, Path]) -> bool:
        """Check if a path is outside the set of watched shader files."""
        path = Path(file_path)
        if path.suffix != WGSL_EXTENSION:
            return True

        try:
            rel_path = path.relative_to(self.project_root)
        except ValueError:
            rel_path = path
        rel_path_str = str(rel_path)

        if any(part in self.ALWAYS_IGNORED for part in rel_path.parts):
            return True

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(rel_path_str, pattern) or fnmatch.fnmatch(path.name, pattern):
                return True

        return False

    def resolve_entry(self, entry: str) -> PassResult:
        """Run one pass for an entry, record its dependents and notify callbacks.

        Fatal failures (a file unreadable or deleted mid-pass) are reported
        like recoverable ones, and the entry is retried on the next change.
        """
        result: PassResult
        try:
            result = self.service.resolve(entry)
            dependents: Optional[Set[Path]] = set(result.dependent_paths())
        except ImportResolutionError as e:
            result = e
            dependents = None
        except InvariantViolation as e:
            logger.error(
                f"Resolution of {entry} aborted: {e}",
                extra=entry_context(entry, error_kind="invariant_violation"),
            )
            result = e
            dependents = None

        with self._lock:
            self._dependents[entry] = dependents

        self._notify(entry, result)
        return result

    def resolve_all(self) -> Dict[str, PassResult]:
        """Resolve every entry point once."""
        return {entry: self.resolve_entry(entry) for entry in self.entries}

    def affected_entries(self, file_path: Union[str, Path]) -> List[str]:
        """Entry points that must be re-resolved after `file_path` changed."""
        path = Path(file_path).resolve()
        with self._lock:
            return [
                entry
                for entry, dependents in self._dependents.items()
                if dependents is None or path in dependents
            ]

    def handle_change(self, file_path: Union[str, Path]) -> None:
        """React to a created, modified or deleted shader file."""
        if self.should_ignore(file_path):
            return

        entries = self.affected_entries(file_path)
        logger.debug(f"Change in {file_path} affects {len(entries)} entry point(s)")
        for entry in entries:
            self.resolve_entry(entry)

    def start(self) -> None:
        """Start watching the project root.

        Raises:
            RuntimeError: If watcher is already running
        """
        if self._observer is not None and self._observer.is_alive():
            raise RuntimeError("ImportGraphWatcher is already running")

        self._observer = Observer()
        self._observer.schedule(  # type: ignore  # watchdog types vary by version
            self._event_handler, str(self.project_root), recursive=True
        )
        self._observer.start()  # type: ignore  # watchdog types vary by version

        logger.info(f"ImportGraphWatcher started, monitoring {self.project_root}")

    def stop(self) -> None:
        """Stop watching. Blocks until the observer thread terminates (with timeout)."""
        if self._observer is not None and self._observer.is_alive():
            self._observer.stop()  # type: ignore  # watchdog types vary by version
            self._observer.join(timeout=5.0)
            logger.info("ImportGraphWatcher stopped")

    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()


class _ShaderEventHandler(FileSystemEventHandler):
    """Internal event handler for watchdog.

    Delegates to ImportGraphWatcher for filtering and re-resolution.
    """

    def __init__(self, watcher: ImportGraphWatcher):
        super().__init__()
        self.watcher = watcher

    def _handle_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        # Convert path from Union[bytes, str] to str
        self.watcher.handle_change(str(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle_event(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle_event(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._handle_event(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Treated as Delete (old path) + Create (new path)."""
        if event.is_directory or not isinstance(event, FileMovedEvent):
            return

        self.watcher.handle_change(str(event.src_path))
        self.watcher.handle_change(str(event.dest_path))
