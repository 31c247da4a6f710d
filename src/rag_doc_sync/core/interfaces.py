"""
Abstract interfaces for the document registry.

These interfaces define the contracts the registry consumes, enabling
dependency injection for testing and alternative store or reader
implementations.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from rag_doc_sync.models import Document, StoreDocument


class IDocumentStore(ABC):
    """Interface for the remote store that holds ingested documents."""

    @abstractmethod
    async def ingest(self, document: Document) -> None:
        """
        Store all chunks of a document.

        Every stored chunk must be tagged with the document's path and checksum
        so the document can later be forgotten as a unit.

        Args:
            document: Document with its ordered chunks

        Raises:
            IngestionError: If the upload fails; partial uploads are rolled back
        """
        pass

    @abstractmethod
    async def forget(self, document: StoreDocument) -> None:
        """
        Delete every chunk stored for the given (path, checksum) pair.

        Args:
            document: Store record to remove

        Raises:
            VectorStoreError: If the deletion fails
        """
        pass

    @abstractmethod
    async def get_ingested(self) -> list[StoreDocument]:
        """
        List the distinct documents currently held by the store.

        Returns:
            One entry per (path, checksum) pair

        Raises:
            VectorStoreError: If the store cannot be queried
        """
        pass


class IFileReader(ABC):
    """Interface for extracting plain text from a file format."""

    @abstractmethod
    def can_read(self, file_path: Path) -> bool:
        """
        Check if this reader supports the given file.

        Args:
            file_path: Path to check

        Returns:
            True if the reader can extract text from this file
        """
        pass

    @abstractmethod
    def read_text(self, file_path: Path) -> str:
        """
        Read the full text of a file.

        Args:
            file_path: Path to the file to read

        Returns:
            Extracted text

        Raises:
            DocumentReadError: If the file cannot be read
        """
        pass


class IChunker(ABC):
    """Interface for splitting document text into chunks."""

    @abstractmethod
    def chunkify(self, text: str) -> list[str]:
        """Split text into ordered chunks."""
        pass


class IChunkUploader(ABC):
    """Interface for the low-level upload operations the ingestion pipeline drives."""

    @abstractmethod
    async def upload_chunks(self, document: Document, chunks: list[str]) -> None:
        """Upload one bucket of chunks tagged with the document's path and checksum."""
        pass

    @abstractmethod
    async def delete_chunks(self, path: str, checksum: int) -> None:
        """Delete every chunk tagged with the given path and checksum."""
        pass
