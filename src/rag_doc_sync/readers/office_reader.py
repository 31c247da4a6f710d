"""
Office document readers.

Word documents are read with python-docx. OpenDocument text and plain XML
files are both XML underneath, so their text nodes are collected with
ElementTree; an ``.odt`` file is a zip archive whose body lives in
``content.xml``.
"""

import logging
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path

from docx import Document as DocxDocument

from rag_doc_sync.core.interfaces import IFileReader
from rag_doc_sync.models.exceptions import DocumentReadError

logger = logging.getLogger(__name__)

ODT_CONTENT = "content.xml"


def element_text(root: ET.Element) -> str:
    """Join the non-blank text nodes under an element, one per line."""
    return "\n".join(text.strip() for text in root.itertext() if text.strip())


class DocxFileReader(IFileReader):
    """Extracts paragraph and table text from ``.docx`` files."""

    def can_read(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lower() == ".docx"

    def read_text(self, file_path: Path) -> str:
        try:
            doc = DocxDocument(str(file_path))
        except Exception as e:
            raise DocumentReadError(
                f"Failed to read docx file {file_path}: {e}",
                file_path=str(file_path),
                reader=type(self).__name__,
                underlying_error=e,
            ) from e

        text = [paragraph.text for paragraph in doc.paragraphs if paragraph.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                text.extend(cell.text for cell in row.cells if cell.text.strip())

        logger.debug("Extracted %d text blocks from %s", len(text), file_path)
        return "\n".join(text)


class XmlFileReader(IFileReader):
    """Extracts the text nodes of ``.xml`` and OpenDocument ``.odt`` files."""

    EXTENSIONS = frozenset({".xml", ".odt"})

    def can_read(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lower() in self.EXTENSIONS

    def read_text(self, file_path: Path) -> str:
        file_path = Path(file_path)
        try:
            if file_path.suffix.lower() == ".odt":
                with zipfile.ZipFile(file_path) as archive:
                    root = ET.fromstring(archive.read(ODT_CONTENT))
            else:
                root = ET.parse(file_path).getroot()
        except (OSError, KeyError, zipfile.BadZipFile, ET.ParseError) as e:
            raise DocumentReadError(
                f"Failed to read xml file {file_path}: {e}",
                file_path=str(file_path),
                reader=type(self).__name__,
                underlying_error=e,
            ) from e

        return element_text(root)
