"""
Retrieval module - candidate selection for the permission-aware filter.

This module provides:
- Document: The document model
- DocumentCollection: Ordered, read-only document set
- retrieve(): Case-insensitive substring retrieval pass
- Reference seed data
"""

# Document model
from authz_rag_pipeline.retrieval.document import SPICEDB_OBJECT_KEY, Document

# Collection and retrieval pass
from authz_rag_pipeline.retrieval.store import (
    DocumentCollection,
    as_collection,
    retrieve,
)

# Seed data
from authz_rag_pipeline.retrieval.seeds import (
    get_reference_documents,
    get_reference_relationships,
    seed_permission_checker,
)

__all__ = [
    # Document
    "Document",
    "SPICEDB_OBJECT_KEY",
    # Collection
    "DocumentCollection",
    "as_collection",
    "retrieve",
    # Seeds
    "get_reference_documents",
    "get_reference_relationships",
    "seed_permission_checker",
]
