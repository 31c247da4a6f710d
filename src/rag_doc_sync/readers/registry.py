"""
Ordered reader dispatch.

Readers are consulted in registration order and the first one that claims a
file wins. Registration order is the only tie-break; readers are never
re-sorted by how specific they are.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from rag_doc_sync.core.interfaces import IFileReader
from rag_doc_sync.models.exceptions import ReaderNotFoundError

logger = logging.getLogger(__name__)


class ReaderRegistry:
    """Holds readers in registration order."""

    def __init__(self, readers: list[IFileReader] | None = None):
        self._readers: list[IFileReader] = []
        if readers:
            self.register(*readers)

    def register(self, *readers: IFileReader) -> None:
        """Append readers; earlier registrations take precedence."""
        for reader in readers:
            self._readers.append(reader)
            logger.debug("Registered reader %s", type(reader).__name__)

    def find(self, file_path: Path) -> IFileReader:
        """
        Return the first reader that can read the file.

        Raises:
            ReaderNotFoundError: If no registered reader claims the file
        """
        for reader in self._readers:
            if reader.can_read(file_path):
                return reader
        raise ReaderNotFoundError(f"Unable to find reader for file: {file_path}", file_path=str(file_path))

    def can_read(self, file_path: Path) -> bool:
        return any(reader.can_read(file_path) for reader in self._readers)

    def __iter__(self) -> Iterator[IFileReader]:
        return iter(self._readers)

    def __len__(self) -> int:
        return len(self._readers)

