"""
Core module - shared protocols and types for the entire system.

USAGE:
------
from authz_rag_pipeline.core import PermissionChecker, CheckPermissionRequest

class MyChecker:
    '''Implements PermissionChecker protocol.'''
    ...
"""

from authz_rag_pipeline.core.protocols import (
    # Protocols
    PermissionChecker,
    AsyncPermissionChecker,
    # Data classes
    Permissionship,
    ObjectReference,
    SubjectReference,
    CheckPermissionRequest,
    # Errors
    AuthorizationError,
    PermissionCheckError,
)

__all__ = [
    # Protocols
    "PermissionChecker",
    "AsyncPermissionChecker",
    # Data classes
    "Permissionship",
    "ObjectReference",
    "SubjectReference",
    "CheckPermissionRequest",
    # Errors
    "AuthorizationError",
    "PermissionCheckError",
]
