"""Unit tests for registry configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest
from rag_doc_sync.config import EmbeddingDevice, LogLevel, RegistryConfig, get_config, reload_config, set_config
from rag_doc_sync.models import ConfigurationError


class TestRegistryConfig:
    """Test cases for RegistryConfig."""

    def test_defaults(self):
        config = RegistryConfig(_env_file=None)

        assert config.doc_root == Path("./docs")
        assert config.chunk_size == 1000
        assert config.chunk_overlap == 100
        assert config.debounce_seconds == 0.5
        assert config.request_size == 16384
        assert config.milvus_collection == "documents"
        assert config.reset_store is False

    def test_environment_override(self, monkeypatch, tmp_path):
        """Test that prefixed environment variables are applied."""
        monkeypatch.setenv("RAG_DOC_SYNC_DOC_ROOT", str(tmp_path))
        monkeypatch.setenv("RAG_DOC_SYNC_CHUNK_SIZE", "50")
        monkeypatch.setenv("RAG_DOC_SYNC_CHUNK_OVERLAP", "5")
        monkeypatch.setenv("RAG_DOC_SYNC_RESET_STORE", "true")

        config = RegistryConfig(_env_file=None)

        assert config.doc_root == tmp_path
        assert config.chunk_size == 50
        assert config.chunk_overlap == 5
        assert config.reset_store is True

    @pytest.mark.parametrize("size,overlap", [(10, 10), (10, 11)])
    def test_overlap_must_be_smaller_than_size(self, size, overlap):
        with pytest.raises(ConfigurationError) as exc_info:
            RegistryConfig(_env_file=None, chunk_size=size, chunk_overlap=overlap)

        assert exc_info.value.context["config_key"] == "chunk_overlap"

    @pytest.mark.parametrize(
        "field,value",
        [("chunk_size", 0), ("chunk_overlap", -1), ("debounce_seconds", 0), ("request_size", 0)],
    )
    def test_rejects_out_of_range_values(self, field, value):
        with pytest.raises(ValueError):
            RegistryConfig(_env_file=None, **{field: value})

    def test_should_ignore_file(self):
        config = RegistryConfig(_env_file=None, ignored_patterns=["*.tmp", "*/drafts/*"])

        assert config.should_ignore_file(Path("/docs/a.tmp"))
        assert config.should_ignore_file("/docs/drafts/a.txt")
        assert not config.should_ignore_file(Path("/docs/a.txt"))

    def test_milvus_connection_args(self):
        config = RegistryConfig(
            _env_file=None, milvus_host="milvus.local", milvus_port=19531, milvus_user="u", milvus_password="p"
        )

        assert config.get_milvus_connection_args() == {
            "uri": "http://milvus.local:19531",
            "db_name": "default",
            "timeout": 30,
            "user": "u",
            "password": "p",
        }

    def test_milvus_connection_args_without_credentials(self):
        args = RegistryConfig(_env_file=None).get_milvus_connection_args()

        assert "user" not in args
        assert "password" not in args

    def test_explicit_embedding_device(self):
        config = RegistryConfig(_env_file=None, embedding_device=EmbeddingDevice.CPU)

        assert config.resolve_embedding_device() == "cpu"

    def test_auto_embedding_device_falls_back_to_cpu(self):
        config = RegistryConfig(_env_file=None)

        with patch("torch.cuda.is_available", return_value=False), patch(
            "torch.backends.mps.is_available", return_value=False
        ):
            assert config.resolve_embedding_device() == "cpu"

    def test_embedding_cache_dir_default(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

        config = RegistryConfig(_env_file=None)

        assert config.embedding_cache_dir == tmp_path / "rag_doc_sync" / "models"

    def test_log_config(self, tmp_path):
        """Test the logging dictConfig built from settings."""
        config = RegistryConfig(_env_file=None, log_level=LogLevel.DEBUG, log_file=tmp_path / "sync.log")

        log_config = config.get_log_config()

        handler = log_config["handlers"]["default"]
        assert handler["class"] == "logging.FileHandler"
        assert handler["filename"] == str(tmp_path / "sync.log")
        assert log_config["loggers"]["rag_doc_sync"]["level"] == "DEBUG"

    def test_log_config_defaults_to_stream(self):
        handler = RegistryConfig(_env_file=None).get_log_config()["handlers"]["default"]

        assert handler["class"] == "logging.StreamHandler"
        assert "filename" not in handler


class TestGlobalConfig:
    """Test cases for the process-wide configuration instance."""

    def test_set_and_get_config(self, registry_config):
        try:
            set_config(registry_config)
            assert get_config() is registry_config
        finally:
            set_config(None)

    def test_reload_config(self, monkeypatch):
        monkeypatch.setenv("RAG_DOC_SYNC_RESULTS", "7")
        try:
            assert reload_config().results == 7
        finally:
            set_config(None)
