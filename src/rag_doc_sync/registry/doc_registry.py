"""
Document registry.

Keeps the remote document store in sync with the document root: ``sync`` runs
a full reconciliation pass, ``watch`` applies incremental updates from
coalesced file system events until ``stop`` is called.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from rag_doc_sync.chunking import Chunker, checksum
from rag_doc_sync.core.interfaces import IChunker, IDocumentStore, IFileReader
from rag_doc_sync.models import (
    DiskDocument,
    Document,
    FileChangeEvent,
    FileOp,
    MonitoringError,
    ReaderNotFoundError,
    StoreDocument,
    SyncError,
    SyncReport,
)
from rag_doc_sync.monitoring.debouncer import EventDebouncer
from rag_doc_sync.monitoring.file_watcher import DocumentFileWatcher
from rag_doc_sync.readers import ReaderRegistry
from rag_doc_sync.registry.reconciler import compute_sync_plan, relative_key, scan_documents

logger = logging.getLogger(__name__)

MAX_RECORDED_ERRORS = 100


class DocRegistry:
    """
    Synchronizes a directory tree with a document store.

    ``sync`` must not be run concurrently with itself on one instance; calls
    that overlap are serialized.
    """

    def __init__(
        self,
        config,
        store: IDocumentStore,
        chunker: IChunker | None = None,
        readers: ReaderRegistry | None = None,
        file_watcher: DocumentFileWatcher | None = None,
        log: logging.Logger | None = None,
    ):
        """
        Initialize the registry.

        Args:
            config: Registry configuration (root, chunking and debounce settings)
            store: Remote document store
            chunker: Optional chunker (built from config if not provided)
            readers: Optional reader registry (empty if not provided)
            file_watcher: Optional file watcher (will create if not provided)
            log: Logger for registry events; defaults to the module logger
        """
        self.config = config
        self.root = Path(config.doc_root).expanduser().resolve()
        self.store = store
        self.chunker = chunker or Chunker.from_config(config)
        self.readers = readers if readers is not None else ReaderRegistry()
        self.log = log or logger

        self.file_watcher = file_watcher or DocumentFileWatcher(config=config, on_event=self._on_raw_event)
        self._debouncer: EventDebouncer | None = None
        self._debounce_task: asyncio.Task | None = None
        self._consumer_task: asyncio.Task | None = None
        self._sync_lock = asyncio.Lock()

        self._stats = {
            "events_processed": 0,
            "operations": {"ingested": 0, "forgotten": 0, "failed": 0},
            "errors": [],
        }

    def register_reader(self, *readers: IFileReader) -> None:
        """Register readers; earlier registrations take precedence."""
        self.readers.register(*readers)

    # ------------------------------------------------------------------
    # Full reconciliation
    # ------------------------------------------------------------------

    async def sync(self) -> SyncReport:
        """
        Run one full reconciliation pass.

        Returns:
            Counts of ingested, forgotten and skipped documents

        Raises:
            SyncError: If the pass could not be completed
        """
        async with self._sync_lock:
            self.log.info("syncing documents directory: %s", self.root)
            self._ensure_root()

            try:
                disk_docs, skipped = await asyncio.to_thread(
                    scan_documents, self.root, self.readers, self.log, self.config.should_ignore_file
                )
            except Exception as e:
                raise SyncError(
                    f"collect docs from disk: {e}", root=str(self.root), stage="scan", underlying_error=e
                ) from e

            try:
                store_docs = await self.store.get_ingested()
            except Exception as e:
                raise SyncError(
                    f"collect ingested docs from store: {e}", root=str(self.root), stage="snapshot", underlying_error=e
                ) from e

            plan = compute_sync_plan(disk_docs, store_docs)
            self.log.debug("sync plan: %d to ingest, %d to forget", len(plan.ingest), len(plan.forget))

            for disk_doc in plan.ingest:
                try:
                    await self._ingest_disk_document(disk_doc)
                except Exception as e:
                    raise SyncError(
                        f"ingest new documents: {disk_doc.path}: {e}",
                        root=str(self.root),
                        stage="ingest",
                        underlying_error=e,
                    ) from e

            for store_doc in plan.forget:
                try:
                    await self.store.forget(store_doc)
                except Exception as e:
                    raise SyncError(
                        f"forget removed documents: {store_doc.path}: {e}",
                        root=str(self.root),
                        stage="forget",
                        underlying_error=e,
                    ) from e
                self.log.info("document removed: %s (crc=%s)", store_doc.path, store_doc.checksum)

            self.log.info("documents registry synchronized: %s", self.root)
            return SyncReport(ingested=len(plan.ingest), forgotten=len(plan.forget), skipped=len(skipped))

    def _ensure_root(self) -> None:
        if not self.root.exists():
            try:
                self.root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SyncError(
                    f"failed to create documents directory: {e}", root=str(self.root), stage="prepare", underlying_error=e
                ) from e
            self.log.info("created documents directory: %s", self.root)
        elif not self.root.is_dir():
            raise SyncError(f"not a directory: {self.root}", root=str(self.root), stage="prepare")

    async def _ingest_disk_document(self, disk_doc: DiskDocument) -> None:
        file_path = self.root / disk_doc.path
        reader = self.readers.find(file_path)
        document = await self._build_document(reader, file_path, disk_doc.path)
        if document.checksum != disk_doc.checksum:
            self.log.debug("%s changed since it was scanned, ingesting current content", disk_doc.path)
        await self.store.ingest(document)
        self.log.info("document ingested: %s (crc=%s)", document.path, document.checksum)

    async def _build_document(self, reader: IFileReader, file_path: Path, key: str) -> Document:
        text = await asyncio.to_thread(reader.read_text, file_path)
        return Document(path=key, checksum=checksum(text), chunks=self.chunker.chunkify(text))

    # ------------------------------------------------------------------
    # Targeted updates
    # ------------------------------------------------------------------

    async def ingest_file(self, file_path: Path) -> bool:
        """
        Ingest the current content of one file.

        Returns:
            False if no reader supports the file (nothing is ingested), True otherwise
        """
        file_path = Path(file_path)
        key = relative_key(self.root, file_path)
        try:
            reader = self.readers.find(file_path)
        except ReaderNotFoundError:
            self.log.warning("unable to ingest file: reader not found: %s", file_path)
            return False

        document = await self._build_document(reader, file_path, key)
        await self.store.ingest(document)
        self.log.info("document ingested: %s (crc=%s)", document.path, document.checksum)
        return True

    async def forget_file(self, file_path: Path) -> int:
        """
        Forget every store record held for one file's path.

        Returns:
            Number of records removed
        """
        key = relative_key(self.root, Path(file_path))
        records: list[StoreDocument] = [doc for doc in await self.store.get_ingested() if doc.path == key]
        for record in records:
            await self.store.forget(record)
            self.log.info("document removed: %s (crc=%s)", record.path, record.checksum)
        return len(records)

    async def process_event(self, event: FileChangeEvent) -> None:
        """
        Apply one coalesced change event.

        The flag checks are independent: a WRITE or CREATE re-ingests the path,
        a RENAME forgets the old path (the new path arrives as its own CREATE),
        a REMOVE forgets the path. Failures are logged, never raised.
        """
        self._stats["events_processed"] += 1
        try:
            relative_key(self.root, event.file_path)
        except ValueError:
            self.log.warning("ignoring event outside documents root: %s", event)
            return

        if event.has(FileOp.WRITE) or event.has(FileOp.CREATE):
            self.log.debug("fsevent write: %s", event.file_path)
            try:
                forgotten = await self.forget_file(event.file_path)
            except Exception as e:
                self._record_failure(event, "forget", e)
                self.log.warning("failed to handle write file: failed to forget file %s: %s", event.file_path, e)
                return
            self._stats["operations"]["forgotten"] += forgotten

            try:
                if await self.ingest_file(event.file_path):
                    self._stats["operations"]["ingested"] += 1
            except Exception as e:
                self._record_failure(event, "ingest", e)
                self.log.warning("failed to handle write file: failed to ingest file %s: %s", event.file_path, e)
                return

        if event.has(FileOp.RENAME):
            self.log.debug("fsevent rename: %s", event.file_path)
            await self._forget_for_event(event, "failed to handle rename file")
            return

        if event.has(FileOp.REMOVE):
            self.log.debug("fsevent remove: %s", event.file_path)
            await self._forget_for_event(event, "forget file failed")

    async def _forget_for_event(self, event: FileChangeEvent, message: str) -> None:
        try:
            self._stats["operations"]["forgotten"] += await self.forget_file(event.file_path)
        except Exception as e:
            self._record_failure(event, "forget", e)
            self.log.warning("%s %s: %s", message, event.file_path, e)

    def _record_failure(self, event: FileChangeEvent, operation: str, error: Exception) -> None:
        self._stats["operations"]["failed"] += 1
        self._stats["errors"].append(f"{event.file_path} ({operation}): {error}")
        if len(self._stats["errors"]) > MAX_RECORDED_ERRORS:
            self._stats["errors"] = self._stats["errors"][-MAX_RECORDED_ERRORS:]

    # ------------------------------------------------------------------
    # Watch loop
    # ------------------------------------------------------------------

    async def watch(self) -> None:
        """
        Start applying file system changes in the background.

        Returns once the watcher is running. Call ``stop`` to end it.

        Raises:
            MonitoringError: If already watching or the watcher cannot start
        """
        if self.is_watching:
            raise MonitoringError("Registry is already watching", path=str(self.root), operation="watch")

        self._debouncer = EventDebouncer(self.config.debounce_seconds)
        self._debounce_task = asyncio.create_task(self._debouncer.run(), name="rag-doc-sync-debouncer")
        self._consumer_task = asyncio.create_task(self._consume(self._debouncer), name="rag-doc-sync-events")

        try:
            self.file_watcher.start_watching(self.root, recursive=True)
        except Exception:
            await self.stop(graceful=False)
            raise

        self.log.info("watching documents directory: %s", self.root)

    def _on_raw_event(self, event: FileChangeEvent) -> None:
        if self._debouncer is None or self._debouncer.closing:
            self.log.debug("dropping event received while not watching: %s", event)
            return
        self._debouncer.submit(event)

    async def _consume(self, debouncer: EventDebouncer) -> None:
        while True:
            event = await debouncer.get()
            if event is None:
                break
            try:
                await self.process_event(event)
            except Exception as e:
                self.log.error("error processing %s: %s", event, e)

    async def stop(self, graceful: bool = True) -> None:
        """
        Stop watching.

        Args:
            graceful: Flush and apply pending events before returning; when False
                pending events are dropped
        """
        try:
            self.file_watcher.stop_watching()
        except MonitoringError as e:
            self.log.error("error stopping file watcher: %s", e)

        tasks = [t for t in (self._debounce_task, self._consumer_task) if t is not None]
        if self._debouncer is not None and graceful:
            self._debouncer.close()
        else:
            for task in tasks:
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._debouncer = None
        self._debounce_task = None
        self._consumer_task = None
        self.log.info("stopped watching documents directory: %s", self.root)

    @property
    def is_watching(self) -> bool:
        return self._consumer_task is not None and not self._consumer_task.done()

    def get_status(self) -> dict[str, Any]:
        """Get registry status and event processing statistics."""
        return {
            "root": str(self.root),
            "watching": self.is_watching,
            "file_watcher": {
                "is_watching": self.file_watcher.is_watching,
                "watched_paths": self.file_watcher.get_watched_paths(),
            },
            "pending_events": self._debouncer.pending_count if self._debouncer else 0,
            "readers": [type(reader).__name__ for reader in self.readers],
            "processing_stats": {
                "events_processed": self._stats["events_processed"],
                "operations": dict(self._stats["operations"]),
                "errors": list(self._stats["errors"]),
            },
        }
