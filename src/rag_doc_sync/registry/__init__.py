"""Document registry: full reconciliation and incremental change tracking."""

from rag_doc_sync.registry.doc_registry import DocRegistry
from rag_doc_sync.registry.reconciler import compute_sync_plan, relative_key, scan_documents

__all__ = ["DocRegistry", "compute_sync_plan", "relative_key", "scan_documents"]
