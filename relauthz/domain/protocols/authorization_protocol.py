"""Authorization protocol (port) for relationship-based access control.

Domain and application code depend on this protocol; SpiceDBAdapter is the
production implementation.

Usage:
    from relauthz.core.container import get_authorization

    authz = get_authorization()

    # Check permission (live, never cached)
    result = await authz.check(ctx, "read", workspace(workspace_id))

    # Write relationships as part of a host transaction
    async with authz.transaction() as scope:
        await authz.write_relationships(ctx, rels, scope=scope)
        await repository.save(...)

    # Replace every permission of a custom role
    await authz.upsert_role(ctx, "auditor", org_id, assign)
"""

from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Protocol
from uuid import UUID

from relauthz.core.errors import DomainError
from relauthz.core.result import Result
from relauthz.domain.errors import NoActorError, PermissionDeniedError
from relauthz.domain.value_objects import AuthzContext, ObjectRef, RelationshipTuple

type RevertAction = Callable[[], Awaitable[None]]
type AssignPermissions = Callable[[ObjectRef, ObjectRef], Iterable[RelationshipTuple]]


class RevertScopeProtocol(Protocol):
    """Collects compensating reverts for one host operation."""

    def ensure_open(self) -> None: ...

    def add_revert(self, revert: RevertAction) -> None: ...

    def commit(self) -> None: ...

    async def abort(self) -> None: ...


class AuthorizationProtocol(Protocol):
    """Protocol for the relationship-based authorization client.

    Error Handling:
        Every operation returns a Result. Store failures are wrapped with the
        failing RPC name and never retried here. Failed reverts are logged,
        never returned.
    """

    async def write_schema(
        self, schema: str | None = None
    ) -> Result[None, DomainError]:
        """Push the schema and track the returned freshness token."""
        ...

    def transaction(self) -> RevertScopeProtocol:
        """Begin a scope that batches reverts of writes made inside it."""
        ...

    async def write_relationships(
        self,
        ctx: AuthzContext,
        relationships: Sequence[RelationshipTuple],
        *,
        scope: RevertScopeProtocol | None = None,
    ) -> Result[RevertAction, DomainError]:
        """Touch every relationship in one atomic batch.

        Args:
            ctx: Authorization context (debug flag is honoured).
            relationships: Tuples to create or update.
            scope: Optional transaction scope. When given, the revert is
                registered there and the returned revert is a no-op.

        Returns:
            Success with the revert (deletes the same tuples atomically),
            or Failure with the store error. Nothing is applied on failure.
        """
        ...

    async def upsert_role(
        self,
        ctx: AuthzContext,
        role_name: str,
        organization_id: UUID,
        assign: AssignPermissions,
        *,
        scope: RevertScopeProtocol | None = None,
    ) -> Result[None, DomainError]:
        """Create or fully replace a custom organization role.

        Existing permission tuples are deleted first, then the role's
        organization tuple plus everything ``assign`` returns is written.
        Members of the role are left untouched.
        """
        ...

    async def check(
        self,
        ctx: AuthzContext,
        permission: str,
        resource: ObjectRef,
    ) -> Result[None, NoActorError | PermissionDeniedError | DomainError]:
        """Check the bound actor's permission on resource.

        Returns:
            Success(None) if permitted.
            Failure(NoActorError) if no actor is bound.
            Failure(ConditionalPermissionError) if caveat context is missing.
            Failure(PermissionDeniedError) otherwise.
        """
        ...

    async def list_role_members(
        self, ctx: AuthzContext, role_name: str
    ) -> Result[list[str], DomainError]:
        """Subject ids holding ``member`` on the role."""
        ...

    async def list_role_permissions(
        self, ctx: AuthzContext, role_name: str, organization_id: UUID
    ) -> Result[list[str], DomainError]:
        """Relation names the role grants on the organization."""
        ...
