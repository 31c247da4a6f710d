"""
Fixed-size character chunking with overlap.

Windows start at offset 0 and advance by ``size - overlap``; the final window
is truncated to the remaining text and is always emitted.
"""

import logging

from rag_doc_sync.core.interfaces import IChunker
from rag_doc_sync.models.exceptions import ChunkingError

logger = logging.getLogger(__name__)


def validate_window(size: int, overlap: int) -> None:
    """Raise ChunkingError unless ``size > overlap >= 0``."""
    if size <= 0:
        raise ChunkingError("chunk size must be positive", size=size, overlap=overlap)
    if overlap < 0:
        raise ChunkingError("chunk overlap must not be negative", size=size, overlap=overlap)
    if overlap >= size:
        raise ChunkingError("chunk overlap must be less than chunk size", size=size, overlap=overlap)


def chunkify(text: str, size: int, overlap: int) -> list[str]:
    """
    Split text into overlapping windows.

    Args:
        text: Text to split
        size: Maximum characters per chunk
        overlap: Characters shared by consecutive chunks

    Returns:
        Ordered chunks; empty when ``text`` is empty

    Raises:
        ChunkingError: If the window settings are invalid
    """
    validate_window(size, overlap)

    length = len(text)
    if length == 0:
        return []

    step = size - overlap
    chunks: list[str] = []
    pos = 0
    while True:
        end = min(pos + size, length)
        chunks.append(text[pos:end])
        if end >= length:
            break
        pos += step
    return chunks


class Chunker(IChunker):
    """Chunker bound to a fixed window size and overlap."""

    def __init__(self, size: int, overlap: int):
        validate_window(size, overlap)
        self.size = size
        self.overlap = overlap

    @classmethod
    def from_config(cls, config) -> "Chunker":
        return cls(config.chunk_size, config.chunk_overlap)

    def chunkify(self, text: str) -> list[str]:
        chunks = chunkify(text, self.size, self.overlap)
        logger.debug("Split %d characters into %d chunks", len(text), len(chunks))
        return chunks
