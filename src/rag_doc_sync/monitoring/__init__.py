"""
Monitoring package for file system change detection.

Provides the watchdog-based watcher that reports raw changes under the
document root and the debouncer that coalesces them per path.
"""

from .debouncer import EventDebouncer, PendingEvent
from .file_watcher import DocumentFileWatcher

__all__ = [
    "DocumentFileWatcher",
    "EventDebouncer",
    "PendingEvent",
]
