"""Domain errors package.

Usage:
    from relauthz.domain.errors import NoActorError, PermissionDeniedError
"""

from relauthz.domain.errors.authorization_error import (
    ConditionalPermissionError,
    NoActorError,
    PermissionDeniedError,
)

__all__ = [
    "ConditionalPermissionError",
    "NoActorError",
    "PermissionDeniedError",
]
