"""
Keeps a vector store in sync with a directory of documents.

Runs a full reconciliation on startup and then applies coalesced file system
changes incrementally.
"""

from rag_doc_sync.config import RegistryConfig
from rag_doc_sync.registry import DocRegistry

__version__ = "0.1.0"

__all__ = ["DocRegistry", "RegistryConfig", "__version__"]
