"""SpiceDB implementation of AuthorizationProtocol.

This adapter maps permission questions onto the SpiceDB relationship graph:
- WriteRelationships (TOUCH) with compensating DELETE reverts
- Transaction scopes that batch reverts for a host operation
- Custom role upsert (full replace of permissions, members kept)
- Live permission checks with a bootstrap escape hatch
- Streamed reads of role members and role permissions
- Optional debug trailers rendered as check-trace trees

Every read and check asks for consistency at least as fresh as the latest
ZedToken this process observed. Permission decisions are never cached.

Reference:
    - relauthz/infrastructure/authorization/schema.zed
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import UUID

import grpc
from authzed.api.v1.core_pb2 import (
    ObjectReference,
    Relationship,
    RelationshipUpdate,
    SubjectReference,
)
from authzed.api.v1.permission_service_pb2 import (
    CheckPermissionRequest,
    CheckPermissionResponse,
    DeleteRelationshipsRequest,
    ReadRelationshipsRequest,
    RelationshipFilter,
    SubjectFilter,
    WriteRelationshipsRequest,
)
from authzed.api.v1.schema_service_pb2 import WriteSchemaRequest

from relauthz.core.enums import ErrorCode
from relauthz.core.result import Failure, Result, Success
from relauthz.domain import policy
from relauthz.domain.enums import ObjectType, Permissionship, Relation
from relauthz.domain.errors import (
    ConditionalPermissionError,
    NoActorError,
    PermissionDeniedError,
)
from relauthz.domain.value_objects import (
    AuthzContext,
    ObjectRef,
    RelationshipTuple,
    SubjectRef,
    current_actor,
    is_bootstrap,
)
from relauthz.infrastructure.authorization.consistency import ConsistencyTracker
from relauthz.infrastructure.authorization.debug_tracer import DebugTracer
from relauthz.infrastructure.authorization.transaction_scope import (
    TransactionScope,
    noop_revert,
)
from relauthz.infrastructure.enums import InfrastructureErrorCode
from relauthz.infrastructure.errors import RelationshipStoreError

if TYPE_CHECKING:
    from authzed.api.v1 import AsyncClient

    from relauthz.domain.protocols.authorization_protocol import (
        AssignPermissions,
        RevertAction,
        RevertScopeProtocol,
    )
    from relauthz.domain.protocols.logger_protocol import LoggerProtocol


SCHEMA_PATH = Path(__file__).with_name("schema.zed")

_PERMISSIONSHIP = {
    CheckPermissionResponse.PERMISSIONSHIP_HAS_PERMISSION: (
        Permissionship.HAS_PERMISSION
    ),
    CheckPermissionResponse.PERMISSIONSHIP_NO_PERMISSION: Permissionship.NO_PERMISSION,
    CheckPermissionResponse.PERMISSIONSHIP_CONDITIONAL_PERMISSION: (
        Permissionship.CONDITIONAL
    ),
}


class SpiceDBAdapter:
    """SpiceDB-backed authorization client.

    Implements AuthorizationProtocol on top of the authzed AsyncClient.

    Note:
        The adapter owns its ConsistencyTracker. Create one adapter per
        process (see relauthz.core.container) so all requests share the
        same freshness floor.

    Attributes:
        _client: authzed AsyncClient (permissions + schema services).
        _tracker: Latest observed ZedToken.
        _tracer: Debug trailer renderer.
        _logger: Structured logger.
        _debug: Adapter-wide debug switch, OR-ed with AuthzContext.debug.
    """

    def __init__(
        self,
        client: "AsyncClient",
        logger: "LoggerProtocol",
        *,
        tracker: ConsistencyTracker | None = None,
        debug: bool = False,
    ) -> None:
        """Initialize adapter with dependencies.

        Args:
            client: Connected authzed AsyncClient.
            logger: Structured logger.
            tracker: Freshness tracker. A new one is created when omitted.
            debug: Request debug trailers on every call.
        """
        self._client = client
        self._logger = logger
        self._tracker = tracker or ConsistencyTracker()
        self._tracer = DebugTracer(logger)
        self._debug = debug

    @property
    def tracker(self) -> ConsistencyTracker:
        return self._tracker

    def set_debugging(self, enabled: bool) -> None:
        self._debug = enabled

    # =========================================================================
    # Schema
    # =========================================================================

    async def write_schema(
        self, schema: str | None = None
    ) -> Result[None, RelationshipStoreError]:
        """Push the schema and track the returned freshness token.

        Args:
            schema: Schema text. Defaults to the bundled schema.zed.

        Returns:
            Result with None on success, or RelationshipStoreError.
        """
        text = schema
        if text is None:
            text = SCHEMA_PATH.read_text(encoding="utf-8")
        try:
            response = await self._client.WriteSchema(WriteSchemaRequest(schema=text))
        except grpc.RpcError as e:
            self._logger.error("write_schema_failed", error=e)
            return Failure(
                error=_store_error(
                    "WriteSchema", ErrorCode.SCHEMA_WRITE_FAILED, "write schema", e
                )
            )

        self._tracker.store(response.written_at)
        self._logger.info("schema_written", schema_bytes=len(text))
        return Success(value=None)

    # =========================================================================
    # Relationship writes
    # =========================================================================

    def transaction(self) -> TransactionScope:
        """Begin a scope that batches reverts of the writes made inside it."""
        return TransactionScope(self._logger)

    async def write_relationships(
        self,
        ctx: AuthzContext,
        relationships: Sequence[RelationshipTuple],
        *,
        scope: "RevertScopeProtocol | None" = None,
    ) -> Result["RevertAction", RelationshipStoreError]:
        """Touch every relationship in one atomic WriteRelationships call.

        Args:
            ctx: Authorization context.
            relationships: Tuples to create or update.
            scope: When given, the revert is registered into the scope and
                the returned revert does nothing.

        Returns:
            Result with the revert callable, or RelationshipStoreError.
        """
        if not relationships:
            return Success(value=noop_revert)
        if scope is not None:
            scope.ensure_open()

        messages = [to_relationship(rel) for rel in relationships]
        texts = [str(rel) for rel in relationships]
        request = WriteRelationshipsRequest(
            updates=[
                RelationshipUpdate(
                    operation=RelationshipUpdate.OPERATION_TOUCH, relationship=message
                )
                for message in messages
            ]
        )

        try:
            response = await self._unary(
                ctx,
                self._client.WriteRelationships,
                request,
                rpc="WriteRelationships",
                write_relationships=texts,
            )
        except grpc.RpcError as e:
            self._logger.error(
                "write_relationships_failed",
                error=e,
                quantity=len(texts),
                relationships=texts,
            )
            return Failure(
                error=_store_error(
                    "WriteRelationships",
                    ErrorCode.RELATIONSHIP_WRITE_FAILED,
                    "write relationships",
                    e,
                )
            )

        self._tracker.store(response.written_at)
        self._logger.info("relationships_written", quantity=len(texts))

        revert = self._revert_for(ctx, messages, texts)
        if scope is not None:
            # One failure in the host operation reverts every write in it
            try:
                scope.add_revert(revert)
            except RuntimeError:
                # Scope closed while the write was in flight
                await revert()
                raise
            return Success(value=noop_revert)
        return Success(value=revert)

    def _revert_for(
        self, ctx: AuthzContext, messages: list[Relationship], texts: list[str]
    ) -> "RevertAction":
        request = WriteRelationshipsRequest(
            updates=[
                RelationshipUpdate(
                    operation=RelationshipUpdate.OPERATION_DELETE, relationship=message
                )
                for message in messages
            ]
        )

        async def revert() -> None:
            # WriteRelationships keeps the delete atomic, unlike DeleteRelationships
            try:
                response = await self._unary(
                    ctx,
                    self._client.WriteRelationships,
                    request,
                    rpc="WriteRelationships",
                    delete_relationships=texts,
                )
            except grpc.RpcError as e:
                # Orphaned tuples must be reconciled out of band
                self._logger.error(
                    "revert_relationships_failed",
                    error=e,
                    quantity=len(texts),
                    relationships=texts,
                )
                return
            self._tracker.store(response.written_at)
            self._logger.info("relationships_reverted", quantity=len(texts))

        return revert

    async def with_relationships[T, E](
        self,
        ctx: AuthzContext,
        relationships: Sequence[RelationshipTuple],
        operation: Callable[[], Awaitable[Result[T, E]]],
    ) -> Result[T, E | RelationshipStoreError]:
        """Write relationships, then run operation; revert if it fails.

        The revert runs when operation returns Failure or raises. An
        exception is re-raised after the revert.

        Args:
            ctx: Authorization context.
            relationships: Tuples the operation depends on.
            operation: Host operation to run after the write.

        Returns:
            The write failure, or the operation's own result.
        """
        written = await self.write_relationships(ctx, relationships)
        if isinstance(written, Failure):
            return written

        revert = written.value
        try:
            result = await operation()
        except (Exception, asyncio.CancelledError):
            await revert()
            raise

        if isinstance(result, Failure):
            await revert()
        return result

    # =========================================================================
    # Roles
    # =========================================================================

    async def upsert_role(
        self,
        ctx: AuthzContext,
        role_name: str,
        organization_id: UUID,
        assign: "AssignPermissions",
        *,
        scope: "RevertScopeProtocol | None" = None,
    ) -> Result[None, RelationshipStoreError]:
        """Create or fully replace a custom organization role.

        Every existing permission of the role on the organization is
        deleted, then the role-organization tuple plus the tuples returned
        by ``assign`` are written. An ``assign`` returning nothing leaves the
        role with zero permissions. Role members are not touched.

        If the delete succeeds but the write fails, the role keeps zero
        permissions until the caller retries.

        Role names are not namespaced per organization: two organizations
        upserting the same name share one org_role object.

        Args:
            ctx: Authorization context.
            role_name: Role name (org_role object id).
            organization_id: Organization the role belongs to.
            assign: Returns the permission tuples for (role, organization).
            scope: Optional transaction scope for the write's revert.

        Returns:
            Result with None on success, or RelationshipStoreError.
        """
        role = policy.org_role(role_name)
        org = policy.organization(organization_id)
        relationships = [policy.role_in_organization(role, org), *assign(role, org)]
        log = self._logger.bind(role=role_name, organization_id=str(organization_id))

        try:
            deleted = await self._unary(
                ctx,
                self._client.DeleteRelationships,
                DeleteRelationshipsRequest(
                    relationship_filter=role_permissions_filter(
                        role_name, organization_id
                    )
                ),
                rpc="DeleteRelationships",
            )
        except grpc.RpcError as e:
            log.error("role_permissions_delete_failed", error=e)
            return Failure(
                error=_store_error(
                    "DeleteRelationships",
                    ErrorCode.RELATIONSHIP_DELETE_FAILED,
                    "delete existing role permissions",
                    e,
                )
            )
        self._tracker.store(deleted.deleted_at)

        written = await self.write_relationships(ctx, relationships, scope=scope)
        if isinstance(written, Failure):
            log.warning(
                "role_left_without_permissions",
                quantity=len(relationships),
            )
            return Failure(error=written.error)

        log.info("role_upserted", permissions=len(relationships) - 1)
        return Success(value=None)

    # =========================================================================
    # Permission checks
    # =========================================================================

    async def check(
        self,
        ctx: AuthzContext,
        permission: str,
        resource: ObjectRef,
    ) -> Result[
        None, NoActorError | PermissionDeniedError | RelationshipStoreError
    ]:
        """Check the bound actor's permission on resource.

        Args:
            ctx: Authorization context holding the actor.
            permission: Permission name declared on the resource definition.
            resource: Object being accessed.

        Returns:
            Success(None) when permitted, otherwise a Failure with
            NoActorError, ConditionalPermissionError, PermissionDeniedError
            or RelationshipStoreError.
        """
        actor, found = current_actor(ctx)
        if not found or actor is None:
            return Failure(
                error=NoActorError(
                    code=ErrorCode.NO_AUTHORIZATION_ACTOR,
                    message="no authorization actor in context",
                )
            )

        if is_bootstrap(actor):
            return Success(value=None)

        subject = actor.subject
        request = CheckPermissionRequest(
            consistency=self._tracker.consistency(),
            resource=to_object_reference(resource),
            permission=permission,
            subject=SubjectReference(object=to_object_reference(subject)),
        )
        try:
            response = await self._unary(
                ctx, self._client.CheckPermission, request, rpc="CheckPermission"
            )
        except grpc.RpcError as e:
            self._logger.error(
                "permission_check_failed",
                error=e,
                permission=permission,
                resource=str(resource),
                subject=str(subject),
            )
            return Failure(
                error=_store_error(
                    "CheckPermission",
                    ErrorCode.PERMISSION_CHECK_FAILED,
                    "check permission",
                    e,
                )
            )

        outcome = _PERMISSIONSHIP.get(
            response.permissionship, Permissionship.UNSPECIFIED
        )
        self._logger.info(
            "permission_checked",
            permission=permission,
            resource=str(resource),
            subject=str(subject),
            permissionship=outcome.value,
        )

        match outcome:
            case Permissionship.HAS_PERMISSION:
                return Success(value=None)
            case Permissionship.CONDITIONAL:
                return Failure(
                    error=ConditionalPermissionError(
                        code=ErrorCode.CONDITIONAL_PERMISSION_DENIED,
                        message="not authorized: conditional permission",
                        required_permission=permission,
                        resource=str(resource),
                        subject=str(subject),
                    )
                )
            case _:
                return Failure(
                    error=PermissionDeniedError(
                        code=ErrorCode.PERMISSION_DENIED,
                        message="not authorized",
                        required_permission=permission,
                        resource=str(resource),
                        subject=str(subject),
                    )
                )

    # =========================================================================
    # Relationship queries
    # =========================================================================

    async def list_role_members(
        self, ctx: AuthzContext, role_name: str
    ) -> Result[list[str], RelationshipStoreError]:
        """Subject ids (users or groups) assigned to the role.

        Args:
            ctx: Authorization context.
            role_name: Role name.

        Returns:
            Result with the subject ids, or RelationshipStoreError.
        """
        role = policy.org_role(role_name)
        relationship_filter = RelationshipFilter(
            resource_type=role.object_type,
            optional_resource_id=role.object_id,
            optional_relation=Relation.MEMBER.value,
        )
        return await self._collect(
            ctx,
            relationship_filter,
            lambda rel: rel.subject.object.object_id,
            "find role members",
        )

    async def list_role_permissions(
        self, ctx: AuthzContext, role_name: str, organization_id: UUID
    ) -> Result[list[str], RelationshipStoreError]:
        """Relation names the role grants on the organization.

        Args:
            ctx: Authorization context.
            role_name: Role name.
            organization_id: Organization the permissions are granted on.

        Returns:
            Result with the relation names, or RelationshipStoreError.
        """
        return await self._collect(
            ctx,
            role_permissions_filter(role_name, organization_id),
            lambda rel: rel.relation,
            "read role permissions",
        )

    async def read_relationships(
        self, ctx: AuthzContext, relationship_filter: RelationshipFilter
    ) -> AsyncIterator[RelationshipTuple]:
        """Stream relationships matching the filter.

        Each item arrives as SpiceDB produces it. The stream cannot be
        restarted; call again to re-read.

        Raises:
            grpc.RpcError: If the stream cannot be opened or breaks.
        """
        request = ReadRelationshipsRequest(
            consistency=self._tracker.consistency(),
            relationship_filter=relationship_filter,
        )
        debugging = self._debugging(ctx)
        if debugging:
            call = self._client.ReadRelationships(
                request, metadata=self._tracer.request_metadata
            )
        else:
            call = self._client.ReadRelationships(request)

        try:
            async for response in call:
                yield from_relationship(response.relationship)
        except grpc.RpcError:
            if debugging:
                await self._trace(call, rpc="ReadRelationships")
            raise

        if debugging:
            await self._trace(call, rpc="ReadRelationships")

    async def _collect(
        self,
        ctx: AuthzContext,
        relationship_filter: RelationshipFilter,
        extract: Callable[[RelationshipTuple], str],
        action: str,
    ) -> Result[list[str], RelationshipStoreError]:
        values: list[str] = []
        try:
            async for rel in self.read_relationships(ctx, relationship_filter):
                values.append(extract(rel))
        except grpc.RpcError as e:
            interrupted = len(values) > 0
            self._logger.error(
                "read_relationships_failed",
                error=e,
                action=action,
                received=len(values),
            )
            return Failure(
                error=_store_error(
                    "ReadRelationships",
                    ErrorCode.RELATIONSHIP_READ_FAILED,
                    action,
                    e,
                    infrastructure_code=(
                        InfrastructureErrorCode.RELATIONSHIP_STREAM_INTERRUPTED
                        if interrupted
                        else None
                    ),
                    received=len(values),
                )
            )
        return Success(value=values)

    # =========================================================================
    # Call plumbing
    # =========================================================================

    def _debugging(self, ctx: AuthzContext) -> bool:
        return self._debug or ctx.debug

    async def _unary(
        self,
        ctx: AuthzContext,
        method: Callable[..., Any],
        request: Any,
        **trace_context: Any,
    ) -> Any:
        if not self._debugging(ctx):
            return await method(request)

        call = method(request, metadata=self._tracer.request_metadata)
        try:
            response = await call
        except grpc.RpcError:
            await self._trace(call, **trace_context)
            raise
        await self._trace(call, **trace_context)
        return response

    async def _trace(self, call: Any, **trace_context: Any) -> None:
        try:
            trailers = await call.trailing_metadata()
        except grpc.RpcError as e:
            self._logger.debug("debug_rpc_no_trailers", error=str(e), **trace_context)
            return
        self._tracer.report(trailers, **trace_context)


# =============================================================================
# Conversions
# =============================================================================


def to_object_reference(ref: ObjectRef) -> ObjectReference:
    return ObjectReference(object_type=ref.object_type, object_id=ref.object_id)


def to_relationship(rel: RelationshipTuple) -> Relationship:
    return Relationship(
        resource=to_object_reference(rel.resource),
        relation=rel.relation,
        subject=SubjectReference(
            object=to_object_reference(rel.subject.object),
            optional_relation=rel.subject.relation or "",
        ),
    )


def from_relationship(message: Relationship) -> RelationshipTuple:
    return RelationshipTuple(
        resource=ObjectRef(message.resource.object_type, message.resource.object_id),
        relation=message.relation,
        subject=SubjectRef(
            object=ObjectRef(
                message.subject.object.object_type, message.subject.object.object_id
            ),
            relation=message.subject.optional_relation or None,
        ),
    )


def role_permissions_filter(
    role_name: str, organization_id: UUID
) -> RelationshipFilter:
    """Every relation from the organization to the role's has_role subject set.

    Matches only permission tuples. Membership tuples live on the org_role
    object and are never matched.
    """
    org = policy.organization(organization_id)
    return RelationshipFilter(
        resource_type=org.object_type,
        optional_resource_id=org.object_id,
        optional_subject_filter=SubjectFilter(
            subject_type=ObjectType.ORG_ROLE.value,
            optional_subject_id=role_name,
            optional_relation=SubjectFilter.RelationFilter(
                relation=Relation.HAS_ROLE.value
            ),
        ),
    )


_UNAVAILABLE_STATUSES = frozenset(
    {grpc.StatusCode.UNAVAILABLE, grpc.StatusCode.DEADLINE_EXCEEDED}
)


def _store_error(
    operation: str,
    code: ErrorCode,
    action: str,
    error: grpc.RpcError,
    *,
    infrastructure_code: InfrastructureErrorCode | None = None,
    **details: Any,
) -> RelationshipStoreError:
    status = error.code() if hasattr(error, "code") else None
    if infrastructure_code is None:
        infrastructure_code = (
            InfrastructureErrorCode.RELATIONSHIP_STORE_UNAVAILABLE
            if status is None or status in _UNAVAILABLE_STATUSES
            else InfrastructureErrorCode.RELATIONSHIP_STORE_ERROR
        )
    error_details = error.details() if hasattr(error, "details") else str(error)
    return RelationshipStoreError(
        code=code,
        infrastructure_code=infrastructure_code,
        message=f"Failed to {action}: {error_details}",
        operation=operation,
        grpc_status=getattr(status, "name", None),
        details={"error": str(error_details), **details},
    )
