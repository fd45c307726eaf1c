"""Authorization actors and the per-operation authorization context.

An AuthzContext carries at most one bound actor plus the debug flag for the
operation. It is an immutable value: binding returns a new context.

Usage:
    ctx = bind_user(AuthzContext(), user.id)
    actor, found = current_actor(ctx)

    # Trusted seeding code only (first user, first organization)
    seed_ctx = bind_bootstrap(AuthzContext())
"""

from dataclasses import dataclass, replace
from typing import Final
from uuid import UUID

from relauthz.domain.value_objects.relationship import ObjectRef

# Subject type that no schema definition uses, so the sentinel can never be
# confused with a real subject.
_BOOTSTRAP_OBJECT_TYPE: Final = "__bootstrap__"


class _BootstrapActor:
    """Privileged sentinel that bypasses every permission check.

    Never constructed from request input; the only instance is BOOTSTRAP.
    """

    __slots__ = ()

    @property
    def subject(self) -> ObjectRef:
        return ObjectRef(_BOOTSTRAP_OBJECT_TYPE, _BOOTSTRAP_OBJECT_TYPE)

    def __repr__(self) -> str:
        return "BootstrapActor"


BOOTSTRAP: Final = _BootstrapActor()


@dataclass(frozen=True, slots=True)
class UserActor:
    """A real user acting on the platform.

    Attributes:
        user_id: User's UUID.
    """

    user_id: UUID

    @property
    def subject(self) -> ObjectRef:
        return ObjectRef("user", str(self.user_id))


type Actor = _BootstrapActor | UserActor


@dataclass(frozen=True, slots=True)
class AuthzContext:
    """Authorization-scoped request context.

    Attributes:
        actor: Bound actor, None when nothing is bound.
        debug: Request debug trailers for calls made with this context.
    """

    actor: Actor | None = None
    debug: bool = False

    def with_debug(self, enabled: bool = True) -> "AuthzContext":
        """Return a copy with debug tracing switched on or off."""
        return replace(self, debug=enabled)


def bind_bootstrap(ctx: AuthzContext) -> AuthzContext:
    """Bind the bootstrap sentinel.

    Only process initialization (seeding the first protected resources)
    may call this; never reach it from a request-driven code path.
    """
    return replace(ctx, actor=BOOTSTRAP)


def bind_user(ctx: AuthzContext, user_id: UUID) -> AuthzContext:
    """Bind a user actor."""
    return replace(ctx, actor=UserActor(user_id=user_id))


def current_actor(ctx: AuthzContext) -> tuple[Actor | None, bool]:
    """Return the bound actor and whether one is bound."""
    return ctx.actor, ctx.actor is not None


def is_bootstrap(actor: Actor | None) -> bool:
    """Check whether actor is the bootstrap sentinel."""
    return actor is BOOTSTRAP
