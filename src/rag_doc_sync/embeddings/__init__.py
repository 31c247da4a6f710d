"""
Embedding functions.

The registry does not interpret embeddings; the embedding function is only
handed to the vector store, which calls it when chunks are added.
"""

from rag_doc_sync.embeddings.embedder import SentenceTransformerEmbeddings

__all__ = ["SentenceTransformerEmbeddings"]
