"""
Permission-aware retrieval filter.

Two passes per query:
1. RETRIEVAL: substring match over the collection, order preserved
2. AUTHORIZATION: one CheckPermission per candidate, in candidate order

Candidates whose metadata carries no usable authorization reference are
dropped without a check. The first check that raises aborts the whole
query: the exception propagates unchanged and no partial result is
returned.

The filter holds no per-call state. Concurrent queries against one
instance are independent; the collection and config are read-only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from authz_rag_pipeline.authz.identity import resolve_identity
from authz_rag_pipeline.core import (
    AsyncPermissionChecker,
    CheckPermissionRequest,
    ObjectReference,
    PermissionChecker,
    Permissionship,
    SubjectReference,
)
from authz_rag_pipeline.filtering.config import FilterConfig
from authz_rag_pipeline.observability import (
    AUTHZ_CHECK_COUNT,
    AUTHZ_CHECK_EVENT,
    AUTHZ_DENIED_COUNT,
    AUTHZ_FAILED_RESOURCE,
    AUTHZ_PERMISSIONSHIP,
    AUTHZ_RESOURCE,
    AUTHZ_UNRESOLVED_COUNT,
    RETRIEVAL_ALLOWED_COUNT,
    RETRIEVAL_ALLOWED_DOC_IDS,
    RETRIEVAL_CANDIDATE_COUNT,
    RETRIEVAL_QUERY_TEXT,
    filter_query_attributes,
    get_config as get_tracing_config,
    get_tracer,
)
from authz_rag_pipeline.observability.tracer import SpanProtocol
from authz_rag_pipeline.retrieval.document import Document
from authz_rag_pipeline.retrieval.store import DocumentCollection, as_collection

logger = logging.getLogger(__name__)


@dataclass
class _QueryStats:
    """Counters for a single query, reported on its span."""
    checks: int = 0
    denied: int = 0
    unresolved: int = 0
    allowed: list[Document] = field(default_factory=list)


class _BasePermissionFilter:
    """Shared construction, request building and span bookkeeping."""

    span_name = "permission_filter.query"

    def __init__(
        self,
        documents: Sequence[Document] | DocumentCollection,
        config: FilterConfig,
    ):
        self.config = config
        self._collection = as_collection(documents)

    @property
    def collection(self) -> DocumentCollection:
        return self._collection

    @property
    def permission(self) -> str:
        return self.config.permission

    @property
    def resource_type(self) -> str:
        return self.config.resource_type

    def _check_request(self, document: Document, principal: str) -> CheckPermissionRequest | None:
        """Build the check for a candidate, or None if it has no identity."""
        identity = resolve_identity(document, self.config.metadata_key)
        if identity is None:
            logger.debug(
                f"Skipping {document.id}: no usable {self.config.metadata_key!r} reference"
            )
            return None

        return CheckPermissionRequest(
            resource=identity.to_object_reference(),
            permission=self.config.permission,
            subject=SubjectReference(
                object=ObjectReference(object_type=self.config.subject_type, object_id=principal)
            ),
        )

    def _span_attributes(self, principal: str, query_text: str) -> dict:
        attributes = filter_query_attributes(
            principal=principal,
            permission=self.config.permission,
            resource_type=self.config.resource_type,
            collection_size=len(self._collection),
        )
        if get_tracing_config().capture_query_text:
            attributes[RETRIEVAL_QUERY_TEXT] = query_text
        return attributes

    def _record_check(
        self,
        span: SpanProtocol,
        request: CheckPermissionRequest,
        permissionship: Permissionship,
    ) -> None:
        span.add_event(
            AUTHZ_CHECK_EVENT,
            {AUTHZ_RESOURCE: str(request.resource), AUTHZ_PERMISSIONSHIP: permissionship.value},
        )

    def _record_outcome(self, span: SpanProtocol, stats: _QueryStats) -> None:
        span.set_attributes({
            AUTHZ_CHECK_COUNT: stats.checks,
            AUTHZ_DENIED_COUNT: stats.denied,
            AUTHZ_UNRESOLVED_COUNT: stats.unresolved,
            RETRIEVAL_ALLOWED_COUNT: len(stats.allowed),
            RETRIEVAL_ALLOWED_DOC_IDS: [doc.id for doc in stats.allowed],
        })

    def _record_failure(
        self,
        span: SpanProtocol,
        stats: _QueryStats,
        request: CheckPermissionRequest,
        error: BaseException,
    ) -> None:
        logger.warning(
            f"Permission check #{stats.checks} failed for {request.subject} on "
            f"{request.resource}, aborting query: {error!r}"
        )
        span.set_attribute(AUTHZ_CHECK_COUNT, stats.checks)
        span.set_attribute(AUTHZ_FAILED_RESOURCE, str(request.resource))
        span.record_exception(error)
        span.set_status("error", str(error))


class PermissionAwareFilter(_BasePermissionFilter):
    """
    Retrieval filter that only returns documents the principal may read.

    Dependencies are INJECTED: pass SpiceDBPermissionChecker in production
    and InMemoryPermissionChecker in tests.
    """

    def __init__(
        self,
        checker: PermissionChecker,
        documents: Sequence[Document] | DocumentCollection,
        config: FilterConfig | None = None,
    ):
        """
        Args:
            checker: Permission checker (injected, not created here)
            documents: Ordered document collection, copied on construction
            config: Filter configuration (defaults to read on document)
        """
        super().__init__(documents, config or FilterConfig())
        self._checker = checker

    def query(self, principal: str, query_text: str) -> list[Document]:
        """
        Return the documents matching query_text that principal may read.

        Args:
            principal: Id of the requesting user
            query_text: Free-text query (empty matches everything)

        Returns:
            Allowed documents, in collection order

        Raises:
            Whatever the checker raises, on the first failing check
        """
        tracer = get_tracer()
        with tracer.start_span(self.span_name, attributes=self._span_attributes(principal, query_text)) as span:
            candidates = self._collection.search(query_text)
            span.set_attribute(RETRIEVAL_CANDIDATE_COUNT, len(candidates))

            stats = _QueryStats()
            for document in candidates:
                request = self._check_request(document, principal)
                if request is None:
                    stats.unresolved += 1
                    continue

                stats.checks += 1
                try:
                    permissionship = self._checker.check_permission(request)
                except BaseException as e:
                    self._record_failure(span, stats, request, e)
                    raise

                self._record_check(span, request, permissionship)
                if permissionship == Permissionship.HAS_PERMISSION:
                    stats.allowed.append(document)
                else:
                    stats.denied += 1

            self._record_outcome(span, stats)
            return stats.allowed


class AsyncPermissionAwareFilter(_BasePermissionFilter):
    """
    Async variant of PermissionAwareFilter.

    Checks are still awaited one at a time. Cancelling the calling task
    raises asyncio.CancelledError out of the in-flight check, which ends
    the candidate loop the same way any other check error does.
    """

    def __init__(
        self,
        checker: AsyncPermissionChecker,
        documents: Sequence[Document] | DocumentCollection,
        config: FilterConfig | None = None,
    ):
        super().__init__(documents, config or FilterConfig())
        self._checker = checker

    async def query(self, principal: str, query_text: str) -> list[Document]:
        """Awaitable version of PermissionAwareFilter.query."""
        tracer = get_tracer()
        with tracer.start_span(self.span_name, attributes=self._span_attributes(principal, query_text)) as span:
            candidates = self._collection.search(query_text)
            span.set_attribute(RETRIEVAL_CANDIDATE_COUNT, len(candidates))

            stats = _QueryStats()
            for document in candidates:
                request = self._check_request(document, principal)
                if request is None:
                    stats.unresolved += 1
                    continue

                stats.checks += 1
                try:
                    permissionship = await self._checker.check_permission(request)
                except BaseException as e:
                    self._record_failure(span, stats, request, e)
                    raise

                self._record_check(span, request, permissionship)
                if permissionship == Permissionship.HAS_PERMISSION:
                    stats.allowed.append(document)
                else:
                    stats.denied += 1

            self._record_outcome(span, stats)
            return stats.allowed


# ---------------------------------------------------------------------------
# FACTORY FUNCTIONS
# ---------------------------------------------------------------------------


def new_filter(
    checker: PermissionChecker,
    permission: str,
    documents: Sequence[Document] | DocumentCollection,
    resource_type: str = "document",
) -> PermissionAwareFilter:
    """
    Construct a PermissionAwareFilter.

    Args:
        checker: Permission checker used for every candidate
        permission: Permission evaluated for every check (e.g., "read")
        documents: Ordered document collection
        resource_type: Informational resource type (e.g., "document")
    """
    config = FilterConfig(permission=permission, resource_type=resource_type)
    return PermissionAwareFilter(checker, documents, config)


def new_async_filter(
    checker: AsyncPermissionChecker,
    permission: str,
    documents: Sequence[Document] | DocumentCollection,
    resource_type: str = "document",
) -> AsyncPermissionAwareFilter:
    """Async counterpart of new_filter."""
    config = FilterConfig(permission=permission, resource_type=resource_type)
    return AsyncPermissionAwareFilter(checker, documents, config)
