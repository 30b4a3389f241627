"""
Filtering module - the permission-aware retrieval filter.

USAGE:
------
from authz_rag_pipeline.authz import get_permission_checker
from authz_rag_pipeline.filtering import new_filter
from authz_rag_pipeline.retrieval import get_reference_documents

rag_filter = new_filter(get_permission_checker(), "read", get_reference_documents())
docs = rag_filter.query("emilia", "roadmap")
"""

from authz_rag_pipeline.filtering.config import FilterConfig, USER_SUBJECT_TYPE
from authz_rag_pipeline.filtering.permission_filter import (
    PermissionAwareFilter,
    AsyncPermissionAwareFilter,
    new_filter,
    new_async_filter,
)

__all__ = [
    "FilterConfig",
    "USER_SUBJECT_TYPE",
    "PermissionAwareFilter",
    "AsyncPermissionAwareFilter",
    "new_filter",
    "new_async_filter",
]
