"""
Unit Tests for the Async Permission-Aware Filter

Same algorithm as the sync filter, awaited one check at a time.
Driven with asyncio.run so no async test plugin is needed.
"""

import asyncio

import pytest

from authz_rag_pipeline.authz.checker import AsyncInMemoryPermissionChecker
from authz_rag_pipeline.core import PermissionCheckError
from authz_rag_pipeline.filtering import AsyncPermissionAwareFilter, new_async_filter
from authz_rag_pipeline.retrieval.document import Document
from authz_rag_pipeline.retrieval.seeds import get_reference_documents, seed_permission_checker


def _ids(docs):
    return [d.id for d in docs]


@pytest.fixture
def checker():
    checker = AsyncInMemoryPermissionChecker()
    seed_permission_checker(checker)
    return checker


@pytest.fixture
def rag_filter(checker):
    return new_async_filter(checker, "read", get_reference_documents())


class TestAsyncQuery:
    """Reference scenario through the async filter."""

    def test_factory_returns_async_filter(self, rag_filter):
        assert isinstance(rag_filter, AsyncPermissionAwareFilter)

    @pytest.mark.parametrize("principal,query,expected", [
        ("emilia", "roadmap", ["doc1"]),
        ("beatrice", "playbook", ["doc2"]),
        ("charlie", "public", ["doc3"]),
        ("charlie", "roadmap", []),
    ])
    def test_visible_documents(self, rag_filter, principal, query, expected):
        assert _ids(asyncio.run(rag_filter.query(principal, query))) == expected

    def test_unresolvable_document_skipped(self, checker):
        docs = get_reference_documents() + [Document(id="doc4", text="Public notes, no reference")]
        rag_filter = new_async_filter(checker, "read", docs)

        assert _ids(asyncio.run(rag_filter.query("charlie", "public"))) == ["doc3"]
        assert len(checker.calls) == 1

    def test_concurrent_queries_independent(self, rag_filter):
        """Queries from different callers on one filter do not interfere."""

        async def run():
            return await asyncio.gather(
                rag_filter.query("emilia", ""),
                rag_filter.query("beatrice", ""),
                rag_filter.query("charlie", ""),
            )

        emilia, beatrice, charlie = asyncio.run(run())

        assert _ids(emilia) == ["doc1", "doc3"]
        assert _ids(beatrice) == ["doc2", "doc3"]
        assert _ids(charlie) == ["doc3"]


class TestAsyncFailFast:
    """Check errors and cancellation both abort the loop."""

    def test_error_aborts_remaining_checks(self, checker, rag_filter):
        checker.fail_on_call = 2

        with pytest.raises(PermissionCheckError):
            asyncio.run(rag_filter.query("emilia", ""))

        assert [c.resource.object_id for c in checker.calls] == ["doc1", "doc2"]

    def test_cancellation_aborts_query(self):
        """Cancelling the caller stops the loop at the in-flight check."""
        checker = AsyncInMemoryPermissionChecker(delay_seconds=0.05)
        seed_permission_checker(checker)
        rag_filter = new_async_filter(checker, "read", get_reference_documents())

        async def run():
            task = asyncio.create_task(rag_filter.query("emilia", ""))
            await asyncio.sleep(0.01)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(run())

        # Cancelled while awaiting the first check: nothing was evaluated
        assert checker.calls == []
