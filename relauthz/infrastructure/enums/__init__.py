"""Infrastructure enums package.

Usage:
    from relauthz.infrastructure.enums import InfrastructureErrorCode
"""

from relauthz.infrastructure.enums.infrastructure_error_code import (
    InfrastructureErrorCode,
)

__all__ = ["InfrastructureErrorCode"]
