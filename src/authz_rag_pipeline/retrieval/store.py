"""
Document collection and the retrieval pass.

Retrieval here is a placeholder: a case-insensitive substring predicate.
There is no scoring, ranking or limit. Whatever survives the predicate is a
candidate, and candidates keep the order of the collection.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from authz_rag_pipeline.retrieval.document import Document


def retrieve(documents: Iterable[Document], query: str) -> list[Document]:
    """
    Return the documents whose text contains query, ignoring case.

    An empty query is a substring of everything and matches every document.

    Args:
        documents: Documents in collection order
        query: Free-text query

    Returns:
        Matching documents in their original order
    """
    needle = query.lower()
    return [doc for doc in documents if needle in doc.text.lower()]


class DocumentCollection:
    """
    Ordered, read-only collection of documents.

    The input sequence is copied into a tuple on construction, so callers
    mutating their own list afterwards cannot change what the filter sees.
    """

    def __init__(self, documents: Iterable[Document] = ()):
        docs = tuple(documents)

        seen: set[str] = set()
        for doc in docs:
            if doc.id in seen:
                raise ValueError(f"Duplicate document id: {doc.id!r}")
            seen.add(doc.id)

        self._documents = docs

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._documents

    def search(self, query: str) -> list[Document]:
        """Run the retrieval pass over this collection."""
        return retrieve(self._documents, query)

    def get(self, doc_id: str) -> Document | None:
        for doc in self._documents:
            if doc.id == doc_id:
                return doc
        return None

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)


def as_collection(documents: Sequence[Document] | DocumentCollection) -> DocumentCollection:
    """Wrap a plain sequence in a DocumentCollection (no-op for collections)."""
    if isinstance(documents, DocumentCollection):
        return documents
    return DocumentCollection(documents)
