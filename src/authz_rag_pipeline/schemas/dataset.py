"""
Dataset file schema.

A dataset is a JSON file describing a document collection together with the
relationships and permission rules an in-memory checker needs to answer
checks for it:

    {
      "documents": [
        {"id": "doc1", "text": "...", "metadata": {"spicedb_object": "document:doc1"}}
      ],
      "relationships": [
        {"resource": "document:doc1", "relation": "owner", "subject": "user:emilia"}
      ],
      "permissions": [
        {"resource_type": "document", "permission": "read", "relations": ["owner", "viewer"]}
      ]
    }

These Pydantic models validate the file before anything is built from it.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from authz_rag_pipeline.authz.checker import InMemoryPermissionChecker, Relationship
from authz_rag_pipeline.retrieval.document import Document


def _split_reference(value: str) -> tuple[str, str]:
    object_type, sep, object_id = value.partition(":")
    if not sep or not object_type or not object_id:
        raise ValueError(f"expected '<type>:<id>', got {value!r}")
    return object_type, object_id


class DocumentRecord(BaseModel):
    """One document of the collection."""

    id: str = Field(min_length=1, description="Unique document id")
    text: str = Field(description="Free-form body, matched by substring")

    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="String metadata, including the authorization reference",
    )
    # Metadata is NOT validated for a reference: documents without one are
    # legitimate and simply never returned.

    def to_document(self) -> Document:
        return Document(id=self.id, text=self.text, metadata=dict(self.metadata))


class RelationshipRecord(BaseModel):
    """A resource#relation@subject tuple."""

    resource: str = Field(description="Resource reference, e.g. 'document:doc1'")
    relation: str = Field(min_length=1, description="Relation name, e.g. 'owner'")
    subject: str = Field(description="Subject reference, e.g. 'user:emilia'")

    @field_validator("resource", "subject")
    @classmethod
    def _check_reference(cls, value: str) -> str:
        _split_reference(value)
        return value

    def to_relationship(self) -> Relationship:
        resource_type, resource_id = _split_reference(self.resource)
        subject_type, subject_id = _split_reference(self.subject)
        return Relationship(resource_type, resource_id, self.relation, subject_type, subject_id)


class PermissionRule(BaseModel):
    """permission = relation_1 + relation_2 + ... on a resource type."""

    resource_type: str = Field(min_length=1)
    permission: str = Field(min_length=1)
    relations: list[str] = Field(min_length=1)


class Dataset(BaseModel):
    """A complete dataset: documents plus the authorization state behind them."""

    documents: list[DocumentRecord]
    relationships: list[RelationshipRecord] = Field(default_factory=list)
    permissions: list[PermissionRule] = Field(default_factory=list)

    @field_validator("documents")
    @classmethod
    def _unique_ids(cls, documents: list[DocumentRecord]) -> list[DocumentRecord]:
        seen: set[str] = set()
        for record in documents:
            if record.id in seen:
                raise ValueError(f"duplicate document id {record.id!r}")
            seen.add(record.id)
        return documents

    def to_documents(self) -> list[Document]:
        """Documents in file order."""
        return [record.to_document() for record in self.documents]

    def to_checker(self) -> InMemoryPermissionChecker:
        """In-memory checker holding this dataset's relationships and rules."""
        checker = InMemoryPermissionChecker(
            relationships=[record.to_relationship() for record in self.relationships],
        )
        for rule in self.permissions:
            checker.define_permission(rule.resource_type, rule.permission, rule.relations)
        return checker


def load_dataset(path: str | Path) -> Dataset:
    """
    Load and validate a dataset file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the content does not match the schema
    """
    return Dataset.model_validate_json(Path(path).read_text(encoding="utf-8"))
