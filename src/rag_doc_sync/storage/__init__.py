"""Remote document storage and bucketed ingestion."""

from rag_doc_sync.storage.ingestion import IngestionPipeline
from rag_doc_sync.storage.milvus_store import FILE_CRC, FILE_PATH, MilvusDocumentStore, document_filter

__all__ = ["IngestionPipeline", "MilvusDocumentStore", "FILE_CRC", "FILE_PATH", "document_filter"]
