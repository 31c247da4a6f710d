"""Core contracts consumed by the document registry."""

from rag_doc_sync.core.interfaces import IChunker, IChunkUploader, IDocumentStore, IFileReader

__all__ = [
    "IChunker",
    "IChunkUploader",
    "IDocumentStore",
    "IFileReader",
]
