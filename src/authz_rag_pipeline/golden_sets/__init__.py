"""
Golden Sets Package

Provides access-control cases with the exact documents each principal
should get back from the reference dataset.

Example:
    from authz_rag_pipeline.golden_sets import (
        AccessCase,
        get_all_access_cases,
        get_case_by_id,
    )
"""

from authz_rag_pipeline.golden_sets.access_cases import (
    ACCESS_CASES,
    AccessCase,
    get_all_access_cases,
    get_case_by_id,
)

__all__ = [
    "ACCESS_CASES",
    "AccessCase",
    "get_all_access_cases",
    "get_case_by_id",
]
