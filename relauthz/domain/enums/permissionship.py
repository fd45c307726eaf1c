"""Outcome of a live permission check."""

from enum import Enum


class Permissionship(str, Enum):
    """Check outcomes reported by the relationship store.

    CONDITIONAL means the answer depends on caveat context that was not
    supplied with the check.
    """

    HAS_PERMISSION = "has_permission"
    NO_PERMISSION = "no_permission"
    CONDITIONAL = "conditional"
    UNSPECIFIED = "unspecified"
