"""
File system watcher for the document root.

Translates watchdog notifications into FileChangeEvents and hands them to the
event loop. Watchdog delivers events on its observer thread, so every event
crosses into the loop with ``call_soon_threadsafe``; nothing else is touched
from the observer thread.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from rag_doc_sync.models import FileChangeEvent, FileOp, MonitoringError

logger = logging.getLogger(__name__)


class DocumentFileWatcher(FileSystemEventHandler):
    """
    File system watcher for a document tree.

    Moves are reported the way the registry expects them: a RENAME for the old
    path followed by a CREATE for the new path.
    """

    def __init__(
        self,
        config,
        on_event: Callable[[FileChangeEvent], None],
    ):
        """
        Initialize the file watcher.

        Args:
            config: Registry configuration with ignore patterns
            on_event: Receives raw events; always invoked on the event loop thread
        """
        super().__init__()
        self.config = config
        self.on_event = on_event

        self._observer: Observer | None = None
        self._watched_paths: set[str] = set()
        self._loop: asyncio.AbstractEventLoop | None = None

    def start_watching(self, directory_path: Path, recursive: bool = True) -> None:
        """
        Start watching a directory for file changes.

        Must be called from within a running event loop.

        Raises:
            MonitoringError: If monitoring cannot be started
        """
        if not directory_path.exists():
            raise MonitoringError(
                f"Directory does not exist: {directory_path}", path=str(directory_path), operation="start_watching"
            )
        if not directory_path.is_dir():
            raise MonitoringError(
                f"Path is not a directory: {directory_path}", path=str(directory_path), operation="start_watching"
            )

        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise MonitoringError(
                "start_watching requires a running event loop",
                path=str(directory_path),
                operation="start_watching",
                underlying_error=e,
            ) from e

        try:
            if self._observer is None:
                self._observer = Observer()

            directory_str = str(directory_path.resolve())
            if directory_str not in self._watched_paths:
                self._observer.schedule(self, directory_str, recursive=recursive)
                self._watched_paths.add(directory_str)
                logger.info("Started monitoring %s (recursive: %s)", directory_path, recursive)

            if not self._observer.is_alive():
                self._observer.start()
                logger.info("File monitoring observer started")

        except Exception as e:
            logger.error("Failed to start file monitoring: %s", e)
            raise MonitoringError(
                f"Failed to start monitoring: {e}",
                path=str(directory_path),
                operation="start_watching",
                underlying_error=e,
            ) from e

    def stop_watching(self) -> None:
        """Stop all file monitoring."""
        try:
            if self._observer and self._observer.is_alive():
                self._observer.stop()
                self._observer.join(timeout=5.0)
                logger.info("File monitoring stopped")
        except Exception as e:
            logger.error("Error stopping file monitoring: %s", e)
            raise MonitoringError("Failed to stop monitoring", operation="stop_watching", underlying_error=e) from e
        finally:
            self._observer = None
            self._watched_paths.clear()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(event.src_path, FileOp.CREATE)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(event.src_path, FileOp.WRITE)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(event.src_path, FileOp.REMOVE)

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._emit(event.src_path, FileOp.RENAME)
        dest_path = getattr(event, "dest_path", None)
        if dest_path:
            self._emit(dest_path, FileOp.CREATE)

    def _emit(self, raw_path: str | bytes, op: FileOp) -> None:
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode()
        file_path = Path(raw_path)

        if self.config.should_ignore_file(file_path):
            logger.debug("Ignoring %s for %s", op.describe(), file_path)
            return

        change_event = FileChangeEvent(file_path, op)
        logger.debug("File event: %s", change_event)

        if self._loop is None or self._loop.is_closed():
            logger.error("No event loop available to deliver %s", change_event)
            return
        try:
            self._loop.call_soon_threadsafe(self.on_event, change_event)
        except RuntimeError as e:
            # loop closed between the check and the call
            logger.error("Failed to deliver %s: %s", change_event, e)

    @property
    def is_watching(self) -> bool:
        """Check if currently watching for file changes."""
        return self._observer is not None and self._observer.is_alive()

    def get_watched_paths(self) -> list[str]:
        """Get list of currently watched directory paths."""
        return list(self._watched_paths)
