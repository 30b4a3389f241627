"""
Document model for the retrieval system.

Single responsibility: Define the structure of documents
held by the collection and returned by the filter.
"""

from dataclasses import dataclass, field

# Metadata key holding the "<resourceType>:<resourceId>" authorization reference
SPICEDB_OBJECT_KEY = "spicedb_object"


@dataclass(frozen=True)
class Document:
    """
    A trivial retrieval "chunk".

    The id identifies results only. It is never used for search or for
    authorization; the authorization reference lives in metadata.
    """
    id: str
    text: str
    metadata: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "metadata": dict(self.metadata),
        }
