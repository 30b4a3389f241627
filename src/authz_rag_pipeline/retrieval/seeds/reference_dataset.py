"""
Reference dataset seed data.

Three documents with different audiences plus the relationships that
grant access to them:

    definition user {}

    definition document {
      relation owner: user
      relation viewer: user

      permission read = owner + viewer
    }

Emilia owns doc1, Beatrice can view doc2, everyone can view doc3.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from authz_rag_pipeline.retrieval.document import SPICEDB_OBJECT_KEY, Document

if TYPE_CHECKING:
    from authz_rag_pipeline.authz.checker import InMemoryRelationshipStore, Relationship


REFERENCE_USERS = ("emilia", "beatrice", "charlie")

# (resource_type, permission) -> relations that grant it
REFERENCE_PERMISSION_RULES: dict[tuple[str, str], frozenset[str]] = {
    ("document", "read"): frozenset({"owner", "viewer"}),
}


def get_reference_documents() -> list[Document]:
    """
    Get seed documents for the reference collection.

    metadata.spicedb_object matches the object ids the relationships use.
    """
    return [
        Document(
            id="doc1",
            text="Internal roadmap for 2025. Highly confidential.",
            metadata={SPICEDB_OBJECT_KEY: "document:doc1"},
        ),
        Document(
            id="doc2",
            text="Customer success playbook and escalation procedures.",
            metadata={SPICEDB_OBJECT_KEY: "document:doc2"},
        ),
        Document(
            id="doc3",
            text="Public FAQ for all users.",
            metadata={SPICEDB_OBJECT_KEY: "document:doc3"},
        ),
    ]


def get_reference_relationships() -> list[Relationship]:
    """Relationships backing the reference documents."""
    from authz_rag_pipeline.authz.checker import Relationship

    relationships = [
        Relationship("document", "doc1", "owner", "user", "emilia"),
        Relationship("document", "doc2", "viewer", "user", "beatrice"),
    ]
    # Everyone can view doc3
    for user_id in REFERENCE_USERS:
        relationships.append(Relationship("document", "doc3", "viewer", "user", user_id))

    return relationships


def seed_permission_checker(checker: InMemoryRelationshipStore) -> None:
    """
    Load the reference relationships and rules into an in-memory checker.

    Works with both the sync and async in-memory checkers since they share
    the same relationship store.
    """
    for relationship in get_reference_relationships():
        checker.add_relationship(relationship)

    for (resource_type, permission), relations in REFERENCE_PERMISSION_RULES.items():
        checker.define_permission(resource_type, permission, relations)
