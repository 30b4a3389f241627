"""
Permission checker implementations.

Pattern: Protocol → Production impl → Test double → Factory

This module contains:
1. SpiceDBPermissionChecker / AsyncSpiceDBPermissionChecker - authzed gRPC (production)
2. InMemoryPermissionChecker / AsyncInMemoryPermissionChecker - relationship tuples (testing)
3. get_permission_checker() / get_async_permission_checker() - Factory functions

The filter only sees the PermissionChecker protocol, so the whole query
algorithm can be tested in microseconds against the in-memory double
without a SpiceDB container.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Iterable, NamedTuple

import grpc
from authzed.api.v1 import AsyncClient, CheckPermissionResponse, InsecureClient, SyncClient
from authzed.api.v1 import CheckPermissionRequest as SpiceCheckPermissionRequest
from authzed.api.v1 import ObjectReference as SpiceObjectReference
from authzed.api.v1 import SubjectReference as SpiceSubjectReference
from grpcutil import bearer_token_credentials, insecure_bearer_token_credentials

from authz_rag_pipeline.authz.config import SpiceDBConfig, get_config
from authz_rag_pipeline.core import (
    AsyncPermissionChecker,
    CheckPermissionRequest,
    PermissionChecker,
    PermissionCheckError,
    Permissionship,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# SPICEDB (Production)
# ---------------------------------------------------------------------------


def _to_spicedb_request(request: CheckPermissionRequest) -> SpiceCheckPermissionRequest:
    """Translate our request dataclass into the authzed protobuf message."""
    return SpiceCheckPermissionRequest(
        resource=SpiceObjectReference(
            object_type=request.resource.object_type,
            object_id=request.resource.object_id,
        ),
        permission=request.permission,
        subject=SpiceSubjectReference(
            object=SpiceObjectReference(
                object_type=request.subject.object.object_type,
                object_id=request.subject.object.object_id,
            ),
        ),
    )


def _to_permissionship(response: Any, request: CheckPermissionRequest) -> Permissionship:
    """
    Map a CheckPermissionResponse onto our binary Permissionship.

    No caveat context is ever sent, so a conditional answer means the
    caveat could not be satisfied and is treated as a denial. An unset
    permissionship is a malformed response.
    """
    permissionship = response.permissionship

    if permissionship == CheckPermissionResponse.PERMISSIONSHIP_HAS_PERMISSION:
        return Permissionship.HAS_PERMISSION
    if permissionship in (
        CheckPermissionResponse.PERMISSIONSHIP_NO_PERMISSION,
        CheckPermissionResponse.PERMISSIONSHIP_CONDITIONAL_PERMISSION,
    ):
        return Permissionship.NO_PERMISSION

    raise PermissionCheckError(
        f"Unexpected permissionship {permissionship!r} checking "
        f"{request.permission} on {request.resource} for {request.subject}",
        request=request,
    )


def _rpc_error_message(error: grpc.RpcError, request: CheckPermissionRequest) -> str:
    code = error.code() if hasattr(error, "code") else None
    details = error.details() if hasattr(error, "details") else str(error)
    return (
        f"SpiceDB CheckPermission failed for {request.permission} on "
        f"{request.resource} ({code}): {details}"
    )


class SpiceDBPermissionChecker:
    """
    Permission checker backed by SpiceDB over gRPC.

    The client is INJECTED when given, otherwise created lazily from
    config on the first check. Tests pass a MagicMock client.
    """

    def __init__(
        self,
        config: SpiceDBConfig | None = None,
        client: Any | None = None,
    ):
        """
        Args:
            config: Connection configuration (env-derived if not provided)
            client: Pre-built authzed client (optional)
        """
        self.config = config or get_config()
        self._client = client

    def connect(self) -> None:
        """Create the authzed client."""
        if self.config.insecure:
            self._client = InsecureClient(self.config.endpoint, self.config.preshared_key)
        else:
            self._client = SyncClient(
                self.config.endpoint,
                bearer_token_credentials(self.config.preshared_key),
            )
        logger.info(f"Connected to SpiceDB at {self.config.endpoint}")

    def check_permission(self, request: CheckPermissionRequest) -> Permissionship:
        if self._client is None:
            self.connect()

        try:
            response = self._client.CheckPermission(
                _to_spicedb_request(request),
                timeout=self.config.timeout_seconds,
            )
        except grpc.RpcError as e:
            raise PermissionCheckError(_rpc_error_message(e, request), request=request) from e

        return _to_permissionship(response, request)


class AsyncSpiceDBPermissionChecker:
    """
    Async permission checker backed by SpiceDB over gRPC aio.

    Cancellation of the awaiting task surfaces as asyncio.CancelledError,
    which is deliberately not wrapped.
    """

    def __init__(
        self,
        config: SpiceDBConfig | None = None,
        client: Any | None = None,
    ):
        self.config = config or get_config()
        self._client = client

    def connect(self) -> None:
        """Create the authzed aio client."""
        if self.config.insecure:
            credentials = insecure_bearer_token_credentials(self.config.preshared_key)
        else:
            credentials = bearer_token_credentials(self.config.preshared_key)
        self._client = AsyncClient(self.config.endpoint, credentials)
        logger.info(f"Connected to SpiceDB (async) at {self.config.endpoint}")

    async def check_permission(self, request: CheckPermissionRequest) -> Permissionship:
        if self._client is None:
            self.connect()

        try:
            response = await self._client.CheckPermission(
                _to_spicedb_request(request),
                timeout=self.config.timeout_seconds,
            )
        except grpc.RpcError as e:
            raise PermissionCheckError(_rpc_error_message(e, request), request=request) from e

        return _to_permissionship(response, request)


# ---------------------------------------------------------------------------
# IN-MEMORY (Testing/Development)
# ---------------------------------------------------------------------------


class Relationship(NamedTuple):
    """A relationship tuple: resource#relation@subject."""

    resource_type: str
    resource_id: str
    relation: str
    subject_type: str
    subject_id: str


class InMemoryRelationshipStore:
    """
    Relationship tuples plus union permission rules.

    A rule maps (resource_type, permission) to the set of relations that
    grant it, e.g. ("document", "read") -> {"owner", "viewer"}. Checking a
    permission with no rule behaves like SpiceDB checking an undefined
    permission: the check fails.

    Every request is recorded in .calls. Setting fail_on_call=N makes the
    Nth check (1-based) raise `failure` instead of answering.
    """

    def __init__(
        self,
        relationships: Iterable[Relationship] = (),
        rules: dict[tuple[str, str], Iterable[str]] | None = None,
        fail_on_call: int | None = None,
        failure: Exception | None = None,
    ):
        self._relationships: set[Relationship] = set(relationships)
        self._rules: dict[tuple[str, str], frozenset[str]] = {
            key: frozenset(relations) for key, relations in (rules or {}).items()
        }
        self.calls: list[CheckPermissionRequest] = []
        self.fail_on_call = fail_on_call
        self.failure = failure

    def add_relationship(self, relationship: Relationship) -> None:
        self._relationships.add(relationship)

    def remove_relationship(self, relationship: Relationship) -> None:
        self._relationships.discard(relationship)

    def define_permission(
        self,
        resource_type: str,
        permission: str,
        relations: Iterable[str],
    ) -> None:
        """Define `permission` on `resource_type` as the union of `relations`."""
        self._rules[(resource_type, permission)] = frozenset(relations)

    def _evaluate(self, request: CheckPermissionRequest) -> Permissionship:
        self.calls.append(request)

        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise self.failure or PermissionCheckError(
                f"Simulated failure on check #{len(self.calls)}", request=request
            )

        resource = request.resource
        relations = self._rules.get((resource.object_type, request.permission))
        if relations is None:
            raise PermissionCheckError(
                f"Permission {request.permission!r} is not defined on {resource.object_type!r}",
                request=request,
            )

        subject = request.subject.object
        for relation in relations:
            candidate = Relationship(
                resource.object_type,
                resource.object_id,
                relation,
                subject.object_type,
                subject.object_id,
            )
            if candidate in self._relationships:
                return Permissionship.HAS_PERMISSION

        return Permissionship.NO_PERMISSION


class InMemoryPermissionChecker(InMemoryRelationshipStore):
    """In-memory PermissionChecker for tests and local development."""

    def check_permission(self, request: CheckPermissionRequest) -> Permissionship:
        return self._evaluate(request)


class AsyncInMemoryPermissionChecker(InMemoryRelationshipStore):
    """
    In-memory AsyncPermissionChecker.

    Yields to the event loop before answering so that cancellation of the
    calling task is observed at each check, the same as a real network call.
    """

    def __init__(self, *args: Any, delay_seconds: float = 0.0, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.delay_seconds = delay_seconds

    async def check_permission(self, request: CheckPermissionRequest) -> Permissionship:
        await asyncio.sleep(self.delay_seconds)
        return self._evaluate(request)


# ---------------------------------------------------------------------------
# FACTORY FUNCTIONS
# ---------------------------------------------------------------------------


def _use_spicedb(use_spicedb: bool | None) -> bool:
    if use_spicedb is not None:
        return use_spicedb
    return os.environ.get("USE_SPICEDB", "false").lower() in ("true", "1", "yes")


def get_permission_checker(
    use_spicedb: bool | None = None,
    config: SpiceDBConfig | None = None,
) -> PermissionChecker:
    """
    Factory function to get the appropriate permission checker.

    Args:
        use_spicedb: Use SpiceDB (default: read USE_SPICEDB, false if unset)
        config: SpiceDB configuration (env-derived if not provided)

    Returns:
        SpiceDBPermissionChecker, or an InMemoryPermissionChecker seeded
        with the reference dataset
    """
    if _use_spicedb(use_spicedb):
        return SpiceDBPermissionChecker(config)

    from authz_rag_pipeline.retrieval.seeds import seed_permission_checker

    checker = InMemoryPermissionChecker()
    seed_permission_checker(checker)
    return checker


def get_async_permission_checker(
    use_spicedb: bool | None = None,
    config: SpiceDBConfig | None = None,
) -> AsyncPermissionChecker:
    """Async counterpart of get_permission_checker."""
    if _use_spicedb(use_spicedb):
        return AsyncSpiceDBPermissionChecker(config)

    from authz_rag_pipeline.retrieval.seeds import seed_permission_checker

    checker = AsyncInMemoryPermissionChecker()
    seed_permission_checker(checker)
    return checker
