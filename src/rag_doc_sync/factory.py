"""
Wiring for a hosting process.

Builds the logging setup, the Milvus-backed store and a registry with the
default readers from one RegistryConfig.
"""

import logging
import logging.config

from rag_doc_sync.config import RegistryConfig, get_config
from rag_doc_sync.embeddings import SentenceTransformerEmbeddings
from rag_doc_sync.readers import ReaderRegistry, default_readers
from rag_doc_sync.registry import DocRegistry
from rag_doc_sync.storage import MilvusDocumentStore

logger = logging.getLogger(__name__)


def configure_logging(config: RegistryConfig) -> None:
    """Apply the configured log level, format and destination."""
    logging.config.dictConfig(config.get_log_config())


async def create_registry(config: RegistryConfig | None = None) -> DocRegistry:
    """
    Create a registry backed by an initialized Milvus store.

    The caller is expected to run ``sync`` and then ``watch`` on the result.
    """
    config = config or get_config()
    store = MilvusDocumentStore(config, SentenceTransformerEmbeddings(config))
    await store.initialize()

    registry = DocRegistry(config=config, store=store, readers=ReaderRegistry(default_readers()))
    logger.info("Document registry created for %s", registry.root)
    return registry
