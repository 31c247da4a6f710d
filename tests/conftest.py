"""Shared fixtures: an in-memory document store and a permissive reader."""

from pathlib import Path

import pytest
from rag_doc_sync.config import RegistryConfig
from rag_doc_sync.core import IDocumentStore, IFileReader
from rag_doc_sync.models import Document, StoreDocument


class FakeDocStore(IDocumentStore):
    """Records every call and keeps the ingested set in memory."""

    def __init__(self, ingested: list[StoreDocument] | None = None):
        self.ingested: list[StoreDocument] = list(ingested or [])
        self.ingest_calls: list[Document] = []
        self.forget_calls: list[StoreDocument] = []
        self.calls: list[tuple[str, str]] = []
        self.fail_ingest: Exception | None = None
        self.fail_forget: Exception | None = None
        self.fail_get_ingested: Exception | None = None

    async def ingest(self, document: Document) -> None:
        self.calls.append(("ingest", document.path))
        if self.fail_ingest:
            raise self.fail_ingest
        self.ingested.append(document.as_store_document())
        self.ingest_calls.append(document)

    async def forget(self, document: StoreDocument) -> None:
        self.calls.append(("forget", document.path))
        if self.fail_forget:
            raise self.fail_forget
        self.ingested = [d for d in self.ingested if d != document]
        self.forget_calls.append(document)

    async def get_ingested(self) -> list[StoreDocument]:
        if self.fail_get_ingested:
            raise self.fail_get_ingested
        return list(self.ingested)

    @property
    def ingested_paths(self) -> list[str]:
        return [doc.path for doc in self.ingest_calls]

    @property
    def forgotten_paths(self) -> list[str]:
        return [doc.path for doc in self.forget_calls]


class AnyFileReader(IFileReader):
    """Reads every file as UTF-8 text."""

    def can_read(self, file_path: Path) -> bool:
        return True

    def read_text(self, file_path: Path) -> str:
        return Path(file_path).read_text(encoding="utf-8")


@pytest.fixture
def fake_store():
    return FakeDocStore()


@pytest.fixture
def any_reader():
    return AnyFileReader()


@pytest.fixture
def registry_config(tmp_path):
    """Configuration rooted at a temporary directory, isolated from .env files."""
    root = tmp_path / "docs"
    root.mkdir()
    return RegistryConfig(
        _env_file=None,
        doc_root=root,
        chunk_size=16,
        chunk_overlap=4,
        debounce_seconds=0.05,
        request_size=64,
    )
