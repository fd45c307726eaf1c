"""Permission check error types.

Usage:
    from relauthz.core.enums import ErrorCode
    from relauthz.core.result import Failure

    return Failure(error=PermissionDeniedError(
        code=ErrorCode.PERMISSION_DENIED,
        message="not authorized",
        required_permission="read",
        resource="workspace:dogfood",
    ))
"""

from dataclasses import dataclass

from relauthz.core.errors import AuthorizationError, DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class NoActorError(DomainError):
    """No actor bound to the authorization context.

    The API boundary reports this as "not found" so unauthenticated callers
    cannot tell a protected resource from a missing one.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class PermissionDeniedError(AuthorizationError):
    """The relationship store reported no permission.

    Attributes:
        resource: Text form of the checked object (type:id).
        subject: Text form of the checked subject.
    """

    resource: str | None = None
    subject: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ConditionalPermissionError(PermissionDeniedError):
    """Permission depends on caveat context that was not supplied."""

    pass
