"""
File system change notifications.

The same event shape is used for raw notifications coming from the watcher
and for the coalesced events the debouncer emits, the only difference being
that a coalesced event may carry several operation flags at once.
"""

import time
from enum import IntFlag
from pathlib import Path


class FileOp(IntFlag):
    """Operation flags carried by a change event."""

    CREATE = 1
    WRITE = 2
    REMOVE = 4
    RENAME = 8

    def describe(self) -> str:
        """Return a stable, human readable form such as ``CREATE|WRITE``."""
        names = [op.name for op in FileOp if op in self]
        return "|".join(names) if names else "NONE"


class FileChangeEvent:
    """Represents a file system change event."""

    def __init__(self, file_path: Path, ops: FileOp):
        self.file_path = Path(file_path)
        self.ops = FileOp(ops)
        self.timestamp = time.monotonic()

    def has(self, op: FileOp) -> bool:
        """Check whether the given operation flag is set."""
        return bool(self.ops & op)

    def merge(self, other: "FileChangeEvent") -> None:
        """Fold another event for the same path into this one."""
        self.ops |= other.ops
        self.timestamp = other.timestamp

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileChangeEvent):
            return NotImplemented
        return self.file_path == other.file_path and self.ops == other.ops

    def __hash__(self) -> int:
        return hash((self.file_path, int(self.ops)))

    def __str__(self) -> str:
        return f"FileChangeEvent({self.ops.describe()}: {self.file_path})"

    __repr__ = __str__
