"""
Data models for documents tracked by the registry.

A document is identified by its path relative to the registry root together
with the checksum of its text. The same pair is written as metadata on every
chunk stored remotely, which is what lets a document be located and removed
as a unit.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

CHECKSUM_MAX = 2**32 - 1


class DiskDocument(BaseModel):
    """A readable file found under the registry root."""

    path: str = Field(..., min_length=1, description="POSIX path relative to the registry root")
    checksum: int = Field(..., ge=0, le=CHECKSUM_MAX, description="CRC-32 of the document text")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"DiskDocument({self.path}, crc={self.checksum})"


class StoreDocument(BaseModel):
    """A document as recorded by the remote store."""

    path: str = Field(..., min_length=1, description="POSIX path relative to the registry root")
    checksum: int = Field(..., ge=0, le=CHECKSUM_MAX, description="CRC-32 the chunks were ingested under")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"StoreDocument({self.path}, crc={self.checksum})"


class Document(BaseModel):
    """
    Ingest payload for one document.

    Chunks are ordered; their position is their position within the text.
    """

    path: str = Field(..., min_length=1, description="POSIX path relative to the registry root")
    checksum: int = Field(..., ge=0, le=CHECKSUM_MAX, description="CRC-32 of the document text")
    chunks: list[str] = Field(default_factory=list, description="Overlapping windows of the document text")

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def chunk_count(self) -> int:
        """Number of chunks in the document."""
        return len(self.chunks)

    def as_store_document(self) -> StoreDocument:
        """Return the store-side identity of this document."""
        return StoreDocument(path=self.path, checksum=self.checksum)

    def __str__(self) -> str:
        return f"Document({self.path}, crc={self.checksum}, {self.chunk_count} chunks)"


class SyncPlan(BaseModel):
    """Actions computed by one reconciliation diff."""

    ingest: list[DiskDocument] = Field(default_factory=list)
    forget: list[StoreDocument] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.ingest and not self.forget


class SyncReport(BaseModel):
    """Outcome of a completed reconciliation pass."""

    ingested: int = Field(default=0, ge=0)
    forgotten: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0, description="Files with no matching reader")


class SearchResult(BaseModel):
    """A stored chunk returned by a similarity lookup."""

    text: str
    path: str
    score: float
