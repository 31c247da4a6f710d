"""
Readers package for extracting text from documents.

Each reader advertises the files it can handle; the registry picks the first
registered reader that claims a file.
"""

from rag_doc_sync.core.interfaces import IFileReader

from .markdown_reader import MarkdownFileReader
from .office_reader import DocxFileReader, XmlFileReader
from .pdf_reader import PdfFileReader
from .registry import ReaderRegistry
from .text_reader import TextFileReader


def default_readers() -> list[IFileReader]:
    """Readers registered by the factory, in precedence order."""
    return [TextFileReader(), DocxFileReader(), XmlFileReader(), MarkdownFileReader(), PdfFileReader()]


__all__ = [
    "DocxFileReader",
    "MarkdownFileReader",
    "PdfFileReader",
    "ReaderRegistry",
    "TextFileReader",
    "XmlFileReader",
    "default_readers",
]
