"""Domain value objects.

Usage:
    from relauthz.domain.value_objects import AuthzContext, RelationshipTuple
"""

from relauthz.domain.value_objects.actor import (
    BOOTSTRAP,
    Actor,
    AuthzContext,
    UserActor,
    bind_bootstrap,
    bind_user,
    current_actor,
    is_bootstrap,
)
from relauthz.domain.value_objects.relationship import (
    ObjectRef,
    RelationshipTuple,
    SubjectRef,
    relationship,
)

__all__ = [
    "BOOTSTRAP",
    "Actor",
    "AuthzContext",
    "UserActor",
    "bind_bootstrap",
    "bind_user",
    "current_actor",
    "is_bootstrap",
    "ObjectRef",
    "RelationshipTuple",
    "SubjectRef",
    "relationship",
]
