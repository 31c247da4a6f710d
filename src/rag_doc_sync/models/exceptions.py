"""
Custom exception classes for the document registry.

Provides specific exception types for the different failure scenarios of
reconciliation, change tracking and ingestion so callers can tell a skipped
file apart from an aborted sync pass or a half-uploaded document.
"""

from typing import Any


class BaseError(Exception):
    """
    Base exception class for all document registry errors.

    All custom exceptions in the system inherit from this base class
    to enable consistent error handling and logging.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize the error.

        Args:
            message: Human-readable error description
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context information
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation including error code if present."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"context={self.context})"
        )


class ConfigurationError(BaseError):
    """Raised when there are configuration or settings issues."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        expected_type: str | None = None,
        actual_value: Any | None = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if expected_type:
            context["expected_type"] = expected_type
        if actual_value is not None:
            context["actual_value"] = str(actual_value)

        super().__init__(message, error_code="CONFIG_ERROR", context=context)


class ChunkingError(BaseError):
    """Raised when text cannot be split with the requested window settings."""

    def __init__(self, message: str, size: int | None = None, overlap: int | None = None):
        context = {}
        if size is not None:
            context["size"] = size
        if overlap is not None:
            context["overlap"] = overlap

        super().__init__(message, error_code="CHUNKING_ERROR", context=context)


class ReaderNotFoundError(BaseError):
    """Raised when no registered reader claims a file."""

    def __init__(self, message: str, file_path: str | None = None):
        context = {}
        if file_path:
            context["file_path"] = file_path

        super().__init__(message, error_code="READER_NOT_FOUND", context=context)


class DocumentReadError(BaseError):
    """Raised when a reader fails to extract text from a file."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        reader: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if file_path:
            context["file_path"] = file_path
        if reader:
            context["reader"] = reader

        super().__init__(message, error_code="READ_ERROR", context=context, cause=underlying_error)


class SyncError(BaseError):
    """Raised when a reconciliation pass is aborted."""

    def __init__(
        self,
        message: str,
        root: str | None = None,
        stage: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if root:
            context["root"] = root
        if stage:
            context["sync_stage"] = stage

        super().__init__(message, error_code="SYNC_ERROR", context=context, cause=underlying_error)


class VectorStoreError(BaseError):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        collection_name: str | None = None,
        record_count: int | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if operation:
            context["operation"] = operation
        if collection_name:
            context["collection_name"] = collection_name
        if record_count is not None:
            context["record_count"] = record_count

        super().__init__(
            message,
            error_code="VECTOR_STORE_ERROR",
            context=context,
            cause=underlying_error,
        )


class IngestionError(VectorStoreError):
    """
    Raised when uploading a document's chunks fails part way.

    The original upload failure is kept as ``cause``; ``rollback_error`` holds
    the failure of the cleanup attempt, if the cleanup failed too.
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        checksum: int | None = None,
        underlying_error: Exception | None = None,
        rollback_error: Exception | None = None,
    ):
        super().__init__(message, operation="ingest", underlying_error=underlying_error)
        self.error_code = "INGESTION_ERROR"
        self.rollback_error = rollback_error
        if file_path:
            self.context["file_path"] = file_path
        if checksum is not None:
            self.context["checksum"] = checksum
        self.context["rolled_back"] = rollback_error is None


class MonitoringError(BaseError):
    """Raised when file monitoring operations fail."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if path:
            context["path"] = path
        if operation:
            context["operation"] = operation

        super().__init__(
            message,
            error_code="MONITORING_ERROR",
            context=context,
            cause=underlying_error,
        )


class EmbeddingModelError(BaseError):
    """Raised when embedding model loading or inference fails."""

    def __init__(
        self,
        message: str,
        model_name: str | None = None,
        operation: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if model_name:
            context["model_name"] = model_name
        if operation:
            context["operation"] = operation

        super().__init__(
            message,
            error_code="EMBEDDING_ERROR",
            context=context,
            cause=underlying_error,
        )
