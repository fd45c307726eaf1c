"""Core errors package.

Usage:
    from relauthz.core.errors import DomainError, AuthorizationError
"""

from relauthz.core.errors.common_errors import AuthorizationError
from relauthz.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "AuthorizationError",
]
