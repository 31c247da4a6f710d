"""PDF reader backed by PyMuPDF."""

import logging
from pathlib import Path

import fitz  # PyMuPDF

from rag_doc_sync.core.interfaces import IFileReader
from rag_doc_sync.models.exceptions import DocumentReadError

logger = logging.getLogger(__name__)


class PdfFileReader(IFileReader):
    """Extracts the plain text of every page of a PDF, in page order."""

    def can_read(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lower() == ".pdf"

    def read_text(self, file_path: Path) -> str:
        try:
            with fitz.open(str(file_path)) as doc:
                pages = [page.get_text("text") for page in doc]
        except Exception as e:
            raise DocumentReadError(
                f"Failed to read pdf file {file_path}: {e}",
                file_path=str(file_path),
                reader=type(self).__name__,
                underlying_error=e,
            ) from e

        logger.debug("Extracted %d pages from %s", len(pages), file_path)
        return "".join(pages)
