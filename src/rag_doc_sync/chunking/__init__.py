"""Text chunking and content fingerprinting."""

from rag_doc_sync.chunking.chunker import Chunker, chunkify
from rag_doc_sync.chunking.fingerprint import checksum

__all__ = ["Chunker", "chunkify", "checksum"]
