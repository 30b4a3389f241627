"""
Semantic Conventions for Span Attributes

Custom namespaces for the permission-aware filter and the eval gate.
"""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# AUTHZ NAMESPACE
# ---------------------------------------------------------------------------

AUTHZ_PRINCIPAL = "authz.principal"  # "emilia"
AUTHZ_PERMISSION = "authz.permission"  # "read"
AUTHZ_RESOURCE_TYPE = "authz.resource_type"  # "document"
AUTHZ_CHECK_COUNT = "authz.check_count"  # checks issued for this query
AUTHZ_DENIED_COUNT = "authz.denied_count"
AUTHZ_UNRESOLVED_COUNT = "authz.unresolved_count"  # no/malformed reference
AUTHZ_FAILED_RESOURCE = "authz.failed_resource"  # "document:doc2"

# One event per permission check on the query span
AUTHZ_CHECK_EVENT = "authz.check"
AUTHZ_RESOURCE = "authz.resource"  # "document:doc1"
AUTHZ_PERMISSIONSHIP = "authz.permissionship"  # "has_permission"


# ---------------------------------------------------------------------------
# RETRIEVAL NAMESPACE
# ---------------------------------------------------------------------------

RETRIEVAL_QUERY_TEXT = "retrieval.query_text"  # only when capture is enabled
RETRIEVAL_COLLECTION_SIZE = "retrieval.collection_size"
RETRIEVAL_CANDIDATE_COUNT = "retrieval.candidate_count"
RETRIEVAL_ALLOWED_COUNT = "retrieval.allowed_count"
RETRIEVAL_ALLOWED_DOC_IDS = "retrieval.allowed_doc_ids"


# ---------------------------------------------------------------------------
# EVAL NAMESPACE
# ---------------------------------------------------------------------------

EVAL_GATE_NAME = "eval.gate.name"  # "access_control"
EVAL_GATE_STATUS = "eval.gate.status"  # "passed", "failed"
EVAL_CASE_ID = "eval.case.id"  # "emilia-roadmap"
EVAL_CASE_PASSED = "eval.case.passed"  # bool


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------


def filter_query_attributes(
    principal: str,
    permission: str,
    resource_type: str,
    collection_size: int,
) -> dict[str, Any]:
    """Attributes set when a filter query span starts."""
    return {
        AUTHZ_PRINCIPAL: principal,
        AUTHZ_PERMISSION: permission,
        AUTHZ_RESOURCE_TYPE: resource_type,
        RETRIEVAL_COLLECTION_SIZE: collection_size,
    }
