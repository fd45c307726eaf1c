"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.

Categories:
- Authorization errors (NO_AUTHORIZATION_ACTOR, PERMISSION_*)
- Relationship store errors (RELATIONSHIP_*, SCHEMA_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable)."""

    # Authorization errors
    NO_AUTHORIZATION_ACTOR = "no_authorization_actor"
    PERMISSION_DENIED = "permission_denied"
    CONDITIONAL_PERMISSION_DENIED = "conditional_permission_denied"

    # Relationship store errors
    RELATIONSHIP_WRITE_FAILED = "relationship_write_failed"
    RELATIONSHIP_DELETE_FAILED = "relationship_delete_failed"
    RELATIONSHIP_READ_FAILED = "relationship_read_failed"
    PERMISSION_CHECK_FAILED = "permission_check_failed"
    SCHEMA_WRITE_FAILED = "schema_write_failed"
