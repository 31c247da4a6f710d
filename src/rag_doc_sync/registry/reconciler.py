"""
Disk versus store reconciliation.

Documents are keyed by their path relative to the registry root. A document
is ingested when the store has no record for its path or holds it under a
different checksum; a store record is forgotten when the disk has no document
at its path or the checksums differ. A changed file therefore produces both an
ingest of the new content and a forget of the stale record.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from rag_doc_sync.chunking import checksum
from rag_doc_sync.models import DiskDocument, ReaderNotFoundError, StoreDocument, SyncPlan
from rag_doc_sync.readers import ReaderRegistry

logger = logging.getLogger(__name__)


def compute_sync_plan(disk_docs: list[DiskDocument], store_docs: list[StoreDocument]) -> SyncPlan:
    """
    Compute the actions that bring the store in line with the disk.

    Both inputs are folded into path-keyed maps; if a path occurs twice the
    later entry wins.
    """
    disk = {doc.path: doc for doc in disk_docs}
    store = {doc.path: doc for doc in store_docs}

    ingest = [doc for path, doc in disk.items() if path not in store or store[path].checksum != doc.checksum]
    forget = [doc for path, doc in store.items() if path not in disk or disk[path].checksum != doc.checksum]
    return SyncPlan(ingest=ingest, forget=forget)


def relative_key(root: Path, file_path: Path) -> str:
    """Return the store key for a file: its POSIX path relative to the root."""
    return Path(file_path).relative_to(root).as_posix()


def _raise_walk_error(error: OSError) -> None:
    raise error


def scan_documents(
    root: Path,
    readers: ReaderRegistry,
    log: logging.Logger = logger,
    ignore: Callable[[Path], bool] | None = None,
) -> tuple[list[DiskDocument], list[str]]:
    """
    Walk the root and fingerprint every readable regular file.

    Files matched by ``ignore`` are left out entirely, as the watcher drops
    their events. Files no reader claims are skipped with a warning. Any other
    error (a walk error or a failing read) propagates and aborts the scan.

    Returns:
        The disk documents and the relative paths of skipped files
    """
    docs: list[DiskDocument] = []
    skipped: list[str] = []

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            file_path = Path(dirpath) / name
            if not file_path.is_file():
                continue
            if ignore is not None and ignore(file_path):
                log.debug("ignored file: %s", file_path)
                continue

            key = relative_key(root, file_path)
            try:
                reader = readers.find(file_path)
            except ReaderNotFoundError:
                log.warning("unsupported file: %s", file_path)
                skipped.append(key)
                continue

            text = reader.read_text(file_path)
            docs.append(DiskDocument(path=key, checksum=checksum(text)))

    return docs, skipped
