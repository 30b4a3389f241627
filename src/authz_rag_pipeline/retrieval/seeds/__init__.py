"""
Seed data for the retrieval system.

Separating data from infrastructure enables:
- Content updates without code changes
- Easy testing with controlled data
"""

from authz_rag_pipeline.retrieval.seeds.reference_dataset import (
    REFERENCE_PERMISSION_RULES,
    REFERENCE_USERS,
    get_reference_documents,
    get_reference_relationships,
    seed_permission_checker,
)

__all__ = [
    "REFERENCE_PERMISSION_RULES",
    "REFERENCE_USERS",
    "get_reference_documents",
    "get_reference_relationships",
    "seed_permission_checker",
]
