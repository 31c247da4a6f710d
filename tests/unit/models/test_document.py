"""Unit tests for document models."""

import pytest
from pydantic import ValidationError
from rag_doc_sync.models import DiskDocument, Document, StoreDocument, SyncPlan, SyncReport


class TestDocument:
    """Test cases for the Document model."""

    def test_create_valid_document(self):
        document = Document(path="notes/a.txt", checksum=123, chunks=["a", "b"])

        assert document.path == "notes/a.txt"
        assert document.checksum == 123
        assert document.chunk_count == 2
        assert str(document) == "Document(notes/a.txt, crc=123, 2 chunks)"

    def test_as_store_document(self):
        document = Document(path="a.txt", checksum=5, chunks=["x"])

        assert document.as_store_document() == StoreDocument(path="a.txt", checksum=5)

    def test_defaults_to_no_chunks(self):
        assert Document(path="empty.txt", checksum=0).chunks == []

    @pytest.mark.parametrize("checksum", [-1, 2**32])
    def test_checksum_must_be_unsigned_32_bit(self, checksum):
        with pytest.raises(ValidationError):
            Document(path="a.txt", checksum=checksum)

    def test_path_required(self):
        with pytest.raises(ValidationError):
            Document(path="", checksum=1)

    def test_immutable(self):
        document = Document(path="a.txt", checksum=1)

        with pytest.raises(ValidationError):
            document.checksum = 2


class TestIdentityModels:
    """Test cases for the disk and store identities."""

    def test_equality_by_value(self):
        assert StoreDocument(path="a.txt", checksum=1) == StoreDocument(path="a.txt", checksum=1)
        assert StoreDocument(path="a.txt", checksum=1) != StoreDocument(path="a.txt", checksum=2)

    def test_hashable(self):
        docs = {DiskDocument(path="a.txt", checksum=1), DiskDocument(path="a.txt", checksum=1)}

        assert len(docs) == 1

    def test_string_representation(self):
        assert str(DiskDocument(path="a.txt", checksum=1)) == "DiskDocument(a.txt, crc=1)"
        assert str(StoreDocument(path="a.txt", checksum=1)) == "StoreDocument(a.txt, crc=1)"


class TestSyncModels:
    """Test cases for the plan and report models."""

    def test_empty_plan(self):
        assert SyncPlan().is_empty
        assert not SyncPlan(forget=[StoreDocument(path="a.txt", checksum=1)]).is_empty

    def test_report_counts_are_non_negative(self):
        with pytest.raises(ValidationError):
            SyncReport(ingested=-1)
