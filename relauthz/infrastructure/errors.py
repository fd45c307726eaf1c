"""Infrastructure layer error types.

Adapters catch transport exceptions (grpc.RpcError) and map them to these
errors, returned inside Failure.
"""

from dataclasses import dataclass
from typing import Any

from relauthz.core.errors import DomainError
from relauthz.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        infrastructure_code: Original infrastructure error code.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RelationshipStoreError(InfrastructureError):
    """SpiceDB call failed (transport or server error).

    Attributes:
        operation: RPC that failed (WriteRelationships, CheckPermission, ...).
        grpc_status: gRPC status code name when available.
    """

    operation: str
    grpc_status: str | None = None
