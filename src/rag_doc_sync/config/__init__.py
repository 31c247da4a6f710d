"""Configuration management and settings."""

from rag_doc_sync.config.settings import (
    EmbeddingDevice,
    LogLevel,
    RegistryConfig,
    get_config,
    reload_config,
    set_config,
)

__all__ = ["RegistryConfig", "get_config", "reload_config", "set_config", "EmbeddingDevice", "LogLevel"]
