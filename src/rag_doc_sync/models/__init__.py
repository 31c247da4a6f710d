"""Data models and schemas for the document registry."""

from rag_doc_sync.models.document import DiskDocument, Document, SearchResult, StoreDocument, SyncPlan, SyncReport
from rag_doc_sync.models.exceptions import (
    BaseError,
    ChunkingError,
    ConfigurationError,
    DocumentReadError,
    EmbeddingModelError,
    IngestionError,
    MonitoringError,
    ReaderNotFoundError,
    SyncError,
    VectorStoreError,
)
from rag_doc_sync.models.file_change import FileChangeEvent, FileOp

__all__ = [
    "Document",
    "DiskDocument",
    "SearchResult",
    "StoreDocument",
    "SyncPlan",
    "SyncReport",
    "FileChangeEvent",
    "FileOp",
    "BaseError",
    "ChunkingError",
    "ConfigurationError",
    "DocumentReadError",
    "EmbeddingModelError",
    "IngestionError",
    "MonitoringError",
    "ReaderNotFoundError",
    "SyncError",
    "VectorStoreError",
]
