"""Core enums package.

Usage:
    from relauthz.core.enums import ErrorCode, Environment
"""

from relauthz.core.enums.environment import Environment
from relauthz.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
