"""
Filter configuration.

Set once when a filter is constructed and never mutated afterwards.
"""

import os
from dataclasses import dataclass

from authz_rag_pipeline.retrieval.document import SPICEDB_OBJECT_KEY

# Subject kind representing end users
USER_SUBJECT_TYPE = "user"


@dataclass(frozen=True)
class FilterConfig:
    """Configuration for a permission-aware filter.

    resource_type is informational: each check uses the type parsed from
    the document's own reference.

    Environment Variables:
        AUTHZ_RESOURCE_TYPE: Resource type (default: document)
        AUTHZ_PERMISSION: Permission checked for every document (default: read)
        AUTHZ_METADATA_KEY: Metadata key of the reference (default: spicedb_object)
    """

    permission: str = "read"
    resource_type: str = "document"
    metadata_key: str = SPICEDB_OBJECT_KEY
    subject_type: str = USER_SUBJECT_TYPE

    @classmethod
    def from_env(cls) -> "FilterConfig":
        """Load config from environment variables."""
        return cls(
            permission=os.environ.get("AUTHZ_PERMISSION", "read"),
            resource_type=os.environ.get("AUTHZ_RESOURCE_TYPE", "document"),
            metadata_key=os.environ.get("AUTHZ_METADATA_KEY", SPICEDB_OBJECT_KEY),
        )
