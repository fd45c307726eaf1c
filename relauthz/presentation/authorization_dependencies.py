"""SpiceDB authorization dependencies.

FastAPI dependencies that run a live permission check and map authorization
failures onto HTTP responses.

Architecture:
    - Upstream authentication binds the actor into an AuthzContext stored
      on ``request.state.authz_context``
    - This module checks permissions against that context

Status mapping:
    - NoActorError -> 404 (indistinguishable from a missing resource)
    - PermissionDeniedError / ConditionalPermissionError -> 403
    - RelationshipStoreError -> 503

Usage:
    @router.get("/workspaces/{workspace_id}")
    async def get_workspace(
        workspace_id: UUID,
        _: None = Depends(
            require_permission(
                "read",
                lambda request: workspace(request.path_params["workspace_id"]),
            )
        ),
    ):
        ...
"""

from collections.abc import Awaitable, Callable
from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, Request, status

from relauthz.core.container import get_authorization
from relauthz.core.errors import DomainError
from relauthz.core.result import Failure
from relauthz.domain.errors import NoActorError, PermissionDeniedError
from relauthz.domain.protocols.authorization_protocol import AuthorizationProtocol
from relauthz.domain.value_objects import AuthzContext, ObjectRef
from relauthz.infrastructure.errors import RelationshipStoreError


def get_authz_context(request: Request) -> AuthzContext:
    """Authorization context bound by upstream authentication.

    Returns an unbound context when nothing was bound, so the check fails
    as NoActorError.
    """
    ctx = getattr(request.state, "authz_context", None)
    if isinstance(ctx, AuthzContext):
        return ctx
    return AuthzContext()


def raise_for_authorization(error: DomainError) -> NoReturn:
    """Raise the HTTPException matching an authorization failure.

    Raises:
        HTTPException: Always.
    """
    match error:
        case NoActorError():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Resource not found",
            )
        case PermissionDeniedError():
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {error.message}",
            )
        case RelationshipStoreError():
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Authorization service unavailable",
            )
        case _:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Authorization failed",
            )


def require_permission(
    permission: str,
    resource: Callable[[Request], ObjectRef],
) -> Callable[..., Awaitable[None]]:
    """Create a dependency that requires permission on a resource.

    Args:
        permission: Permission name declared on the resource definition.
        resource: Builds the checked object from the request.

    Returns:
        Dependency function that raises HTTPException unless permitted.
    """

    async def permission_checker(
        request: Request,
        ctx: Annotated[AuthzContext, Depends(get_authz_context)],
        authorization: Annotated[AuthorizationProtocol, Depends(get_authorization)],
    ) -> None:
        result = await authorization.check(ctx, permission, resource(request))
        if isinstance(result, Failure):
            raise_for_authorization(result.error)

    return permission_checker
