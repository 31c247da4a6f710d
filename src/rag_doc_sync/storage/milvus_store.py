"""
Milvus document store implementation.

Chunks are stored as LangChain documents whose metadata carries the owning
document's relative path and checksum; those two fields are all the registry
needs to list, forget and roll back documents.
"""

import asyncio
import json
import logging
from typing import Any
from uuid import uuid4

from langchain_core.embeddings import Embeddings
from langchain_milvus import Milvus

from rag_doc_sync.config.settings import RegistryConfig
from rag_doc_sync.core.interfaces import IChunkUploader, IDocumentStore
from rag_doc_sync.models import Document, SearchResult, StoreDocument
from rag_doc_sync.models.exceptions import VectorStoreError
from rag_doc_sync.storage.ingestion import IngestionPipeline

logger = logging.getLogger(__name__)

FILE_PATH = "file_path"
FILE_CRC = "file_crc"
EMPTY_MARKER = ""


def document_filter(path: str, checksum: int) -> str:
    """Build the boolean expression matching every chunk of one document."""
    return f"{FILE_PATH} == {json.dumps(path)} and {FILE_CRC} == {int(checksum)}"


class MilvusDocumentStore(IDocumentStore, IChunkUploader):
    """
    Milvus-backed document store.

    Uploads go through an IngestionPipeline so that each request stays below
    the configured size and a failed document is rolled back.
    """

    def __init__(self, config: RegistryConfig, embeddings: Embeddings):
        """Initialize the store with configuration and an embedding function."""
        self.config = config
        self.embeddings = embeddings
        self.pipeline = IngestionPipeline(self, config.request_size)
        self._vectorstore: Milvus | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the store is initialized."""
        return self._initialized and self._vectorstore is not None

    async def initialize(self) -> None:
        """Attach to (or create) the chunk collection."""
        if self._initialized:
            return

        try:
            self._vectorstore = Milvus(
                embedding_function=self.embeddings,
                collection_name=self.config.milvus_collection,
                connection_args=self.config.get_milvus_connection_args(),
                index_params={"index_type": "IVF_FLAT", "metric_type": "COSINE", "params": {"nlist": 1024}},
                consistency_level="Strong",
                drop_old=self.config.reset_store,
            )

            self._initialized = True
            logger.info(
                "Milvus document store initialized (collection: %s, reset: %s)",
                self.config.milvus_collection,
                self.config.reset_store,
            )

        except Exception as e:
            raise VectorStoreError(
                f"Failed to initialize Milvus document store: {e}",
                operation="initialize",
                collection_name=self.config.milvus_collection,
                underlying_error=e,
            ) from e

    def _require_initialized(self, operation: str) -> Milvus:
        if not self.is_initialized:
            raise VectorStoreError("Document store not initialized", operation=operation)
        return self._vectorstore

    async def ingest(self, document: Document) -> None:
        """Store a document's chunks in size-bounded buckets."""
        self._require_initialized("ingest")
        await self.pipeline.ingest(document)
        logger.debug("Stored %d chunks for %s", document.chunk_count, document.path)

    async def upload_chunks(self, document: Document, chunks: list[str]) -> None:
        """
        Upload one bucket of chunks tagged with the document identity.

        An empty bucket stores a single marker row with empty text so that a
        document without chunks is still listed by get_ingested.
        """
        vectorstore = self._require_initialized("upload_chunks")
        if not chunks:
            logger.debug("Empty bucket for %s, storing marker row", document.path)
            chunks = [EMPTY_MARKER]

        metadatas = [{FILE_PATH: document.path, FILE_CRC: document.checksum} for _ in chunks]
        ids = [str(uuid4()) for _ in chunks]
        try:
            await vectorstore.aadd_texts(chunks, metadatas=metadatas, ids=ids)
        except Exception as e:
            raise VectorStoreError(
                f"Failed to upload chunks for {document.path}: {e}",
                operation="upload_chunks",
                collection_name=self.config.milvus_collection,
                record_count=len(chunks),
                underlying_error=e,
            ) from e

    async def delete_chunks(self, path: str, checksum: int) -> None:
        """Delete every chunk stored for a (path, checksum) pair."""
        vectorstore = self._require_initialized("delete_chunks")
        try:
            await vectorstore.adelete(expr=document_filter(path, checksum))
        except Exception as e:
            raise VectorStoreError(
                f"Failed to delete chunks for {path}: {e}",
                operation="delete_chunks",
                collection_name=self.config.milvus_collection,
                underlying_error=e,
            ) from e

    async def forget(self, document: StoreDocument) -> None:
        """Delete a stored document."""
        try:
            await self.delete_chunks(document.path, document.checksum)
        except VectorStoreError as e:
            raise VectorStoreError(
                f"Failed to forget doc {document.path}: {e.message}",
                operation="forget",
                collection_name=self.config.milvus_collection,
                underlying_error=e.cause,
            ) from e
        logger.debug("Deleted chunks for %s (crc=%s)", document.path, document.checksum)

    async def get_ingested(self) -> list[StoreDocument]:
        """List distinct (path, checksum) pairs held by the collection."""
        vectorstore = self._require_initialized("get_ingested")
        try:
            rows = await asyncio.to_thread(self._query_identities, vectorstore)
        except Exception as e:
            raise VectorStoreError(
                f"Failed to list ingested documents: {e}",
                operation="get_ingested",
                collection_name=self.config.milvus_collection,
                underlying_error=e,
            ) from e

        return self._distinct_documents(rows)

    @staticmethod
    def _query_identities(vectorstore: Milvus) -> list[dict[str, Any]]:
        # pymilvus client calls block, so this runs in a worker thread
        # the collection is created lazily by the first insert
        if not vectorstore.client.has_collection(vectorstore.collection_name):
            return []
        return vectorstore.client.query(
            collection_name=vectorstore.collection_name,
            filter=f"{FILE_CRC} >= 0",
            output_fields=[FILE_PATH, FILE_CRC],
        )

    @staticmethod
    def _distinct_documents(rows: list[dict[str, Any]]) -> list[StoreDocument]:
        docs: list[StoreDocument] = []
        seen: set[tuple[str, int]] = set()
        for row in rows:
            path = row.get(FILE_PATH)
            crc = row.get(FILE_CRC)
            if not path or crc is None:
                continue
            # numeric metadata may round-trip as float
            key = (str(path), int(crc))
            if key in seen:
                continue
            seen.add(key)
            docs.append(StoreDocument(path=key[0], checksum=key[1]))
        return docs

    async def retrieve(self, query: str) -> list[SearchResult]:
        """Return the stored chunks closest to the query."""
        vectorstore = self._require_initialized("retrieve")
        try:
            scored = await vectorstore.asimilarity_search_with_score(query, k=self.config.results)
        except Exception as e:
            raise VectorStoreError(
                f"Failed to retrieve texts: {e}",
                operation="retrieve",
                collection_name=self.config.milvus_collection,
                underlying_error=e,
            ) from e

        return [
            SearchResult(text=doc.page_content, path=str(doc.metadata.get(FILE_PATH, "")), score=float(score))
            for doc, score in scored
            if doc.page_content != EMPTY_MARKER
        ]

    async def cleanup(self) -> None:
        """Release the vector store handle."""
        self._vectorstore = None
        self._initialized = False
        logger.info("Milvus document store cleaned up")

