"""Object types declared by the bundled schema (schema.zed).

Values must match the ``definition`` names in the schema exactly.
"""

from enum import Enum


class ObjectType(str, Enum):
    """Schema definition names."""

    USER = "user"
    GROUP = "group"
    ORGANIZATION = "organization"
    ORG_ROLE = "org_role"
    WORKSPACE = "workspace"
    TEMPLATE = "template"


class Relation(str, Enum):
    """Structural relations that are not role-granted permissions."""

    MEMBER = "member"
    ORGANIZATION = "organization"
    OWNER = "owner"
    HAS_ROLE = "has_role"
