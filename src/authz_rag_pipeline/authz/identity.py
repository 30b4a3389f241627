"""
Identity resolution - map a document to an authorization resource.

Pure parsing step. It never consults the authorization service, and a
document it cannot resolve is simply not checkable (treated as denied).
"""

from __future__ import annotations

from dataclasses import dataclass

from authz_rag_pipeline.core import ObjectReference
from authz_rag_pipeline.retrieval.document import SPICEDB_OBJECT_KEY, Document


@dataclass(frozen=True)
class ResourceIdentity:
    """The (type, id) pair addressing a document in the relationship model."""

    resource_type: str
    resource_id: str

    def to_object_reference(self) -> ObjectReference:
        return ObjectReference(object_type=self.resource_type, object_id=self.resource_id)


def resolve_identity(
    document: Document,
    metadata_key: str = SPICEDB_OBJECT_KEY,
) -> ResourceIdentity | None:
    """
    Resolve the authorization identity stored in a document's metadata.

    The reference looks like "document:doc1" and is split on the first
    colon only, so ids may themselves contain colons.

    Args:
        document: Document to resolve
        metadata_key: Metadata key holding the reference

    Returns:
        ResourceIdentity, or None when the reference is missing, empty
        or has no colon
    """
    reference = document.metadata.get(metadata_key)
    if not reference:
        return None

    parts = reference.split(":", 1)
    if len(parts) != 2:
        return None

    resource_type, resource_id = parts
    return ResourceIdentity(resource_type=resource_type, resource_id=resource_id)
