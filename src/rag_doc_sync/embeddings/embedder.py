"""
Sentence-transformers embedding function.

Implements LangChain's Embeddings interface so it can be handed directly to
the Milvus store; the model is loaded lazily on first use.
"""

import logging

from langchain_core.embeddings import Embeddings

from rag_doc_sync.config.settings import RegistryConfig
from rag_doc_sync.models import EmbeddingModelError

logger = logging.getLogger(__name__)


class SentenceTransformerEmbeddings(Embeddings):
    """
    HuggingFace sentence-transformers embedding function.

    Uses local models to generate embeddings, supporting CPU, CUDA, and MPS (Apple Silicon) devices.
    """

    def __init__(self, config: RegistryConfig):
        """Initialize the embedder with configuration."""
        self.config = config
        self._model = None
        self._device = config.resolve_embedding_device()
        self._model_name = config.embedding_model

        logger.info("Initializing sentence-transformers embedder: %s on %s", self._model_name, self._device)

    @property
    def model(self):
        """Lazy-load the embedding model."""
        if self._model is None:
            self._load_model()
        return self._model

    def _load_model(self):
        try:
            from sentence_transformers import SentenceTransformer

            logger.info("Loading embedding model: %s", self._model_name)
            cache_folder = str(self.config.embedding_cache_dir) if self.config.embedding_cache_dir else None
            self._model = SentenceTransformer(self._model_name, device=self._device, cache_folder=cache_folder)
            logger.info("Model loaded successfully on device: %s", self._device)

        except Exception as e:
            logger.error("Failed to load embedding model: %s", e)
            raise EmbeddingModelError(
                f"Failed to load model {self._model_name}: {e}",
                model_name=self._model_name,
                operation="load_model",
                underlying_error=e,
            ) from e

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of chunk texts."""
        if not texts:
            return []

        try:
            vectors = self.model.encode(
                texts,
                batch_size=self.config.embedding_batch_size,
                convert_to_tensor=False,
                normalize_embeddings=True,
                show_progress_bar=False,
            )
        except EmbeddingModelError:
            raise
        except Exception as e:
            raise EmbeddingModelError(
                f"Failed to generate batch embeddings: {e}",
                model_name=self._model_name,
                operation="embed_documents",
                underlying_error=e,
            ) from e

        return [vector.tolist() for vector in vectors]

    def embed_query(self, text: str) -> list[float]:
        """Embed a single query text."""
        return self.embed_documents([text])[0]

    @property
    def model_name(self) -> str:
        return self._model_name
