"""Result types for railway-oriented programming.

Authorization operations report failures as data instead of raising, so
callers can branch on denial, missing actor and store outages explicitly.

Usage:
    result = await authz.check(ctx, "read", workspace_ref)
    match result:
        case Success():
            ...
        case Failure(error=NoActorError()):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
