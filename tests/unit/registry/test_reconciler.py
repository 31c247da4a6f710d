"""Unit tests for the reconciliation diff and the disk scan."""

from pathlib import Path

import pytest
from rag_doc_sync.chunking import checksum
from rag_doc_sync.models import DiskDocument, DocumentReadError, StoreDocument
from rag_doc_sync.readers import ReaderRegistry, TextFileReader
from rag_doc_sync.registry import compute_sync_plan, relative_key, scan_documents


class TestComputeSyncPlan:
    """Test cases for compute_sync_plan."""

    def test_ingests_new_and_forgets_removed(self):
        """Test the basic disk/store difference."""
        disk = [DiskDocument(path="f1", checksum=1), DiskDocument(path="f2", checksum=2)]
        store = [
            StoreDocument(path="f2", checksum=2),
            StoreDocument(path="f3", checksum=3),
            StoreDocument(path="f4", checksum=4),
        ]

        plan = compute_sync_plan(disk, store)

        assert [doc.path for doc in plan.ingest] == ["f1"]
        assert sorted(doc.path for doc in plan.forget) == ["f3", "f4"]

    def test_changed_checksum_is_ingested_and_forgotten(self):
        """Test that a changed document is re-ingested and its stale record forgotten."""
        plan = compute_sync_plan([DiskDocument(path="a", checksum=10)], [StoreDocument(path="a", checksum=9)])

        assert plan.ingest == [DiskDocument(path="a", checksum=10)]
        assert plan.forget == [StoreDocument(path="a", checksum=9)]

    def test_matching_documents_are_untouched(self):
        """Test that matching path and checksum produce no action."""
        plan = compute_sync_plan([DiskDocument(path="a", checksum=1)], [StoreDocument(path="a", checksum=1)])

        assert plan.is_empty

    def test_empty_inputs(self):
        """Test the diff of two empty sets."""
        assert compute_sync_plan([], []).is_empty

    def test_duplicate_paths_last_write_wins(self):
        """Test that the later entry for a duplicated path is used."""
        disk = [DiskDocument(path="a", checksum=1), DiskDocument(path="a", checksum=2)]

        plan = compute_sync_plan(disk, [StoreDocument(path="a", checksum=2)])

        assert plan.is_empty

    def test_applying_plan_makes_second_diff_empty(self):
        """Test that a diff is empty once its plan has been applied."""
        disk = [DiskDocument(path="a", checksum=1), DiskDocument(path="b", checksum=2)]
        store = [StoreDocument(path="b", checksum=5), StoreDocument(path="c", checksum=3)]

        plan = compute_sync_plan(disk, store)
        store = [doc for doc in store if doc not in plan.forget]
        store += [StoreDocument(path=doc.path, checksum=doc.checksum) for doc in plan.ingest]

        assert compute_sync_plan(disk, store).is_empty


class TestScanDocuments:
    """Test cases for scan_documents."""

    def test_scans_nested_tree_with_relative_keys(self, tmp_path):
        """Test that nested files are keyed by POSIX relative path."""
        (tmp_path / "sub" / "deeper").mkdir(parents=True)
        (tmp_path / "a.txt").write_text("alpha")
        (tmp_path / "sub" / "deeper" / "b.txt").write_text("beta")

        docs, skipped = scan_documents(tmp_path, ReaderRegistry([TextFileReader()]))

        assert docs == [
            DiskDocument(path="a.txt", checksum=checksum("alpha")),
            DiskDocument(path="sub/deeper/b.txt", checksum=checksum("beta")),
        ]
        assert skipped == []

    def test_unsupported_files_are_skipped(self, tmp_path, caplog):
        """Test that files without a reader are skipped with a warning."""
        (tmp_path / "a.txt").write_text("alpha")
        (tmp_path / "image.png").write_bytes(b"\x89PNG")

        with caplog.at_level("WARNING"):
            docs, skipped = scan_documents(tmp_path, ReaderRegistry([TextFileReader()]))

        assert [doc.path for doc in docs] == ["a.txt"]
        assert skipped == ["image.png"]
        assert "unsupported file" in caplog.text

    def test_ignored_files_are_left_out(self, tmp_path):
        """Test that files matching the ignore predicate are neither read nor skipped."""
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "notes.txt").write_bytes(b"\xff\xfe")
        (tmp_path / "a.txt").write_text("alpha")

        docs, skipped = scan_documents(
            tmp_path,
            ReaderRegistry([TextFileReader()]),
            ignore=lambda path: ".git" in path.parts,
        )

        assert [doc.path for doc in docs] == ["a.txt"]
        assert skipped == []

    def test_read_error_aborts_scan(self, tmp_path):
        """Test that a failing read propagates."""
        (tmp_path / "a.txt").write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(DocumentReadError):
            scan_documents(tmp_path, ReaderRegistry([TextFileReader()]))

    def test_walk_error_aborts_scan(self, tmp_path):
        """Test that a walk error propagates."""
        with pytest.raises(OSError):
            scan_documents(tmp_path / "missing", ReaderRegistry([TextFileReader()]))

    def test_checksum_independent_of_scan_order(self, tmp_path):
        """Test that identical content has identical checksums wherever it lives."""
        (tmp_path / "x").mkdir()
        (tmp_path / "one.txt").write_text("same")
        (tmp_path / "x" / "two.txt").write_text("same")

        docs, _ = scan_documents(tmp_path, ReaderRegistry([TextFileReader()]))

        assert docs[0].checksum == docs[1].checksum


class TestRelativeKey:
    """Test cases for relative_key."""

    def test_posix_relative_path(self):
        assert relative_key(Path("/root/docs"), Path("/root/docs/a/b.txt")) == "a/b.txt"

    def test_outside_root(self):
        with pytest.raises(ValueError):
            relative_key(Path("/root/docs"), Path("/elsewhere/b.txt"))
