"""
Core protocols defining contracts for the entire system.

The filter never talks to SpiceDB directly. It talks to a PermissionChecker,
and every authorization backend implements that protocol.

PATTERN:
- Protocol defines the contract
- Production implementation (SpiceDB over gRPC)
- Test double (in-memory relationship store)
- Factory function for instantiation
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# ERRORS
# ---------------------------------------------------------------------------


class AuthorizationError(Exception):
    """Base class for failures talking to the authorization service."""


class PermissionCheckError(AuthorizationError):
    """
    A single permission check could not be answered.

    Raised for transport failures, service errors and responses that carry
    no usable permissionship. The underlying error, if any, is chained as
    __cause__.
    """

    def __init__(self, message: str, request: CheckPermissionRequest | None = None):
        super().__init__(message)
        self.request = request


# ---------------------------------------------------------------------------
# CHECK REQUEST / RESPONSE
# ---------------------------------------------------------------------------


class Permissionship(str, Enum):
    """Binary answer to a permission check."""

    HAS_PERMISSION = "has_permission"
    NO_PERMISSION = "no_permission"


@dataclass(frozen=True)
class ObjectReference:
    """A (type, id) pair addressing an object in the relationship model."""

    object_type: str
    object_id: str

    def __str__(self) -> str:
        return f"{self.object_type}:{self.object_id}"


@dataclass(frozen=True)
class SubjectReference:
    """The subject a permission is evaluated for."""

    object: ObjectReference

    def __str__(self) -> str:
        return str(self.object)


@dataclass(frozen=True)
class CheckPermissionRequest:
    """
    A single permission check.

    Attributes:
        resource: Resource being accessed (e.g., document:doc1)
        permission: Permission to check (e.g., "read")
        subject: Subject asking for access (e.g., user:emilia)
    """

    resource: ObjectReference
    permission: str
    subject: SubjectReference


# ---------------------------------------------------------------------------
# PERMISSION CHECKER PROTOCOLS
# ---------------------------------------------------------------------------


@runtime_checkable
class PermissionChecker(Protocol):
    """
    Contract for answering permission checks.

    Implementations:
    - SpiceDBPermissionChecker (production, gRPC)
    - InMemoryPermissionChecker (testing)
    """

    def check_permission(self, request: CheckPermissionRequest) -> Permissionship:
        """
        Check whether request.subject holds request.permission on request.resource.

        Raises:
            PermissionCheckError: If the check cannot be answered
        """
        ...


@runtime_checkable
class AsyncPermissionChecker(Protocol):
    """
    Async contract for answering permission checks.

    Implementations:
    - AsyncSpiceDBPermissionChecker (production, gRPC aio)
    - AsyncInMemoryPermissionChecker (testing)
    """

    async def check_permission(self, request: CheckPermissionRequest) -> Permissionship:
        """Awaitable version of PermissionChecker.check_permission."""
        ...
