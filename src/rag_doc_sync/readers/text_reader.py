"""Plain text reader."""

import logging
from pathlib import Path

from rag_doc_sync.core.interfaces import IFileReader
from rag_doc_sync.models.exceptions import DocumentReadError

logger = logging.getLogger(__name__)


class TextFileReader(IFileReader):
    """Reads ``.txt`` files as UTF-8."""

    EXTENSIONS = frozenset({".txt"})

    def __init__(self, extensions: set[str] | frozenset[str] | None = None, encoding: str = "utf-8"):
        self.extensions = frozenset(ext.lower() for ext in extensions) if extensions else self.EXTENSIONS
        self.encoding = encoding

    def can_read(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lower() in self.extensions

    def read_text(self, file_path: Path) -> str:
        try:
            return Path(file_path).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(
                f"Failed to read text file {file_path}: {e}",
                file_path=str(file_path),
                reader=type(self).__name__,
                underlying_error=e,
            ) from e
