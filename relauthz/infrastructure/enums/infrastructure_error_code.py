"""Infrastructure-specific error codes.

Internal codes for tracking relationship store failures. They travel
alongside the domain ErrorCode on InfrastructureError.
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    # Relationship store (SpiceDB) errors
    RELATIONSHIP_STORE_UNAVAILABLE = "relationship_store_unavailable"
    RELATIONSHIP_STREAM_INTERRUPTED = "relationship_stream_interrupted"
    RELATIONSHIP_STORE_ERROR = "relationship_store_error"
