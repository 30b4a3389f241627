"""
Authorization module - resource identity and permission checks.

This module provides:
- resolve_identity(): Document metadata -> (resource_type, resource_id)
- SpiceDBConfig: Connection settings
- SpiceDB-backed checkers (production)
- In-memory checkers (testing/development)
- get_permission_checker(): Factory function
"""

from authz_rag_pipeline.authz.identity import ResourceIdentity, resolve_identity
from authz_rag_pipeline.authz.config import SpiceDBConfig, get_config, reset_config
from authz_rag_pipeline.authz.checker import (
    Relationship,
    InMemoryRelationshipStore,
    InMemoryPermissionChecker,
    AsyncInMemoryPermissionChecker,
    SpiceDBPermissionChecker,
    AsyncSpiceDBPermissionChecker,
    get_permission_checker,
    get_async_permission_checker,
)

__all__ = [
    # Identity
    "ResourceIdentity",
    "resolve_identity",
    # Config
    "SpiceDBConfig",
    "get_config",
    "reset_config",
    # Implementations
    "Relationship",
    "InMemoryRelationshipStore",
    "InMemoryPermissionChecker",
    "AsyncInMemoryPermissionChecker",
    "SpiceDBPermissionChecker",
    "AsyncSpiceDBPermissionChecker",
    # Factories
    "get_permission_checker",
    "get_async_permission_checker",
]
