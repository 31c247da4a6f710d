"""
Bucketed document ingestion.

A document's chunks are grouped into buckets whose total UTF-8 size stays
strictly below the configured request size, and each bucket is uploaded in a
single call. If any upload fails, every chunk already stored for the
document's (path, checksum) pair is deleted again so no partial document
remains indexed.
"""

import logging

from rag_doc_sync.core.interfaces import IChunkUploader
from rag_doc_sync.models import Document
from rag_doc_sync.models.exceptions import ConfigurationError, IngestionError

logger = logging.getLogger(__name__)


def chunk_size_bytes(chunk: str) -> int:
    return len(chunk.encode("utf-8"))


class IngestionPipeline:
    """Uploads a document in size-bounded buckets with best-effort rollback."""

    def __init__(self, uploader: IChunkUploader, request_size: int):
        """
        Initialize the pipeline.

        Args:
            uploader: Performs the bucket uploads and the rollback deletion
            request_size: Exclusive upper bound, in bytes, for one bucket
        """
        if request_size <= 0:
            raise ConfigurationError(
                "request_size must be positive",
                config_key="request_size",
                expected_type="int > 0",
                actual_value=request_size,
            )
        self.uploader = uploader
        self.request_size = request_size

    def plan_buckets(self, chunks: list[str]) -> list[list[str]]:
        """
        Group chunks into upload buckets.

        A chunk joins the current bucket while the running total stays under the
        limit; otherwise the current bucket is closed and the chunk starts a new
        one. The last bucket is always returned, so an empty chunk list yields a
        single empty bucket. A chunk that alone exceeds the limit gets a bucket
        of its own.
        """
        buckets: list[list[str]] = []
        bucket: list[str] = []
        size = 0
        for chunk in chunks:
            chunk_size = chunk_size_bytes(chunk)
            if size + chunk_size < self.request_size:
                bucket.append(chunk)
                size += chunk_size
                continue

            if bucket:
                buckets.append(bucket)
            bucket = [chunk]
            size = chunk_size

        buckets.append(bucket)
        return buckets

    async def ingest(self, document: Document) -> None:
        """
        Upload all chunks of a document.

        Raises:
            IngestionError: If a bucket upload fails. The error carries the upload
                failure as its cause and the rollback failure, if any, as
                ``rollback_error``.
        """
        buckets = self.plan_buckets(document.chunks)
        logger.debug("Uploading %s in %d buckets", document, len(buckets))

        for index, bucket in enumerate(buckets):
            try:
                await self.uploader.upload_chunks(document, bucket)
            except Exception as e:
                rollback_error = await self._rollback(document)
                stage = "final bucket" if index == len(buckets) - 1 else f"bucket {index + 1}/{len(buckets)}"
                if rollback_error is not None:
                    message = f"Failed to ingest {stage} of {document.path}: {e}; and failed to rollback: {rollback_error}"
                else:
                    message = f"Failed to ingest {stage} of {document.path}: {e}"
                raise IngestionError(
                    message,
                    file_path=document.path,
                    checksum=document.checksum,
                    underlying_error=e,
                    rollback_error=rollback_error,
                ) from e

    async def _rollback(self, document: Document) -> Exception | None:
        try:
            await self.uploader.delete_chunks(document.path, document.checksum)
        except Exception as e:
            logger.error("Rollback failed for %s (crc=%s): %s", document.path, document.checksum, e)
            return e
        logger.info("Rolled back partial upload of %s (crc=%s)", document.path, document.checksum)
        return None
