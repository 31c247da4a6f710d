"""
Configuration management for the document registry.

Handles environment variables and ``.env`` files, and provides default
settings with validation for the chunker, debouncer, ingestion pipeline and
the Milvus-backed store.
"""

import fnmatch
import os
from enum import Enum
from pathlib import Path
from typing import Any

import torch
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rag_doc_sync.models.exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EmbeddingDevice(str, Enum):
    """Device options for embedding model inference."""

    CPU = "cpu"
    CUDA = "cuda"
    MPS = "mps"  # Apple Metal Performance Shaders
    AUTO = "auto"  # Automatically detect best available


class RegistryConfig(BaseSettings):
    """
    Central configuration class for the document registry.

    Handles all configuration options with environment variable support,
    validation, and sensible defaults for development and production use.
    """

    model_config = SettingsConfigDict(
        env_prefix="RAG_DOC_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # === Document Registry Configuration ===
    doc_root: Path = Field(default=Path("./docs"), description="Directory tree kept in sync with the store")
    chunk_size: int = Field(default=1000, gt=0, description="Characters per chunk")
    chunk_overlap: int = Field(default=100, ge=0, description="Characters shared by consecutive chunks")
    debounce_seconds: float = Field(
        default=0.5, gt=0.0, le=30.0, description="Quiet period before a coalesced file event is emitted"
    )
    request_size: int = Field(default=16384, gt=0, description="Upper bound in bytes for one upload request")
    ignored_patterns: list[str] = Field(
        default=["*.tmp", "*.swp", "*~", "*/.git/*", "*.DS_Store"],
        description="File patterns never handed to the registry by the watcher",
    )

    # === Milvus Vector Database Configuration ===
    milvus_host: str = Field(default="localhost", description="Milvus server hostname or IP address")
    milvus_port: int = Field(default=19530, ge=1, le=65535, description="Milvus server port")
    milvus_user: str | None = Field(default=None, description="Milvus username (if authentication enabled)")
    milvus_password: str | None = Field(default=None, description="Milvus password (if authentication enabled)")
    milvus_db_name: str = Field(default="default", description="Milvus database name")
    milvus_collection: str = Field(default="documents", description="Collection holding document chunks")
    milvus_connection_timeout: int = Field(default=30, ge=5, le=300, description="Connection timeout in seconds")
    reset_store: bool = Field(default=False, description="Drop the collection before the first sync")
    results: int = Field(default=5, ge=1, le=100, description="Number of chunks returned by retrieve()")

    # === Embedding Model Configuration ===
    embedding_model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2", description="HuggingFace model identifier for embeddings"
    )
    embedding_device: EmbeddingDevice = Field(
        default=EmbeddingDevice.AUTO, description="Device for embedding model inference"
    )
    embedding_batch_size: int = Field(default=32, ge=1, le=256, description="Batch size for embedding generation")
    embedding_cache_dir: Path | None = Field(default=None, description="Directory for caching embedding models")

    # === Logging Configuration ===
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(default=None, description="Log file path (stderr if None)")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log message format"
    )

    @field_validator('embedding_cache_dir', mode='before')
    @classmethod
    def validate_embedding_cache_dir(cls, v):
        """Set default cache directory if not provided."""
        if v is None:
            cache_home = os.environ.get('XDG_CACHE_HOME')
            if cache_home:
                return Path(cache_home) / "rag_doc_sync" / "models"
            return Path.home() / ".cache" / "rag_doc_sync" / "models"
        return Path(v)

    @model_validator(mode='after')
    def validate_chunk_settings(self):
        """Ensure chunk overlap is less than chunk size."""
        if self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError(
                "chunk_overlap must be less than chunk_size",
                config_key="chunk_overlap",
                expected_type="int < chunk_size",
                actual_value=self.chunk_overlap,
            )
        return self

    def get_milvus_connection_args(self) -> dict[str, Any]:
        """Get Milvus connection arguments in the form langchain-milvus expects."""
        args: dict[str, Any] = {
            "uri": f"http://{self.milvus_host}:{self.milvus_port}",
            "db_name": self.milvus_db_name,
            "timeout": self.milvus_connection_timeout,
        }

        if self.milvus_user:
            args["user"] = self.milvus_user
        if self.milvus_password:
            args["password"] = self.milvus_password

        return args

    def resolve_embedding_device(self) -> str:
        """Resolve the actual device to use for embedding inference."""
        if self.embedding_device == EmbeddingDevice.AUTO:
            if torch.cuda.is_available():
                return "cuda"
            if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
                return "mps"
            return "cpu"
        return EmbeddingDevice(self.embedding_device).value

    def should_ignore_file(self, file_path: str | Path) -> bool:
        """Check if a file should be ignored based on patterns."""
        path_str = Path(file_path).as_posix()
        return any(fnmatch.fnmatch(path_str, pattern) for pattern in self.ignored_patterns)

    def get_log_config(self) -> dict[str, Any]:
        """Get logging configuration dictionary."""
        level = LogLevel(self.log_level).value
        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": self.log_format}},
            "handlers": {
                "default": {
                    "level": level,
                    "formatter": "standard",
                    "class": "logging.StreamHandler" if not self.log_file else "logging.FileHandler",
                }
            },
            "loggers": {"rag_doc_sync": {"handlers": ["default"], "level": level, "propagate": False}},
        }

        if self.log_file:
            config["handlers"]["default"]["filename"] = str(self.log_file)

        return config


# Global configuration instance
_config: RegistryConfig | None = None


def get_config() -> RegistryConfig:
    """
    Get the global configuration instance.

    Creates a new instance on first call and reuses it for subsequent calls.
    """
    global _config
    if _config is None:
        _config = RegistryConfig()
    return _config


def reload_config() -> RegistryConfig:
    """Force reload the configuration from environment/files."""
    global _config
    _config = RegistryConfig()
    return _config


def set_config(config: RegistryConfig) -> None:
    """
    Set a custom configuration instance.

    Primarily used for testing or when the hosting process loads settings itself.
    """
    global _config
    _config = config
