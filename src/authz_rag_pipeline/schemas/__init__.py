"""Pydantic schemas for dataset files."""

from authz_rag_pipeline.schemas.dataset import (
    Dataset,
    DocumentRecord,
    PermissionRule,
    RelationshipRecord,
    load_dataset,
)

__all__ = [
    "Dataset",
    "DocumentRecord",
    "PermissionRule",
    "RelationshipRecord",
    "load_dataset",
]
