"""Permission relations a custom role can grant on an organization.

Each value is a relation on ``definition organization`` whose subject is
``org_role#has_role``. Resource permissions in the schema are computed from
these relations (e.g. workspace ``read = owner + organization->workspace_read``).

Usage:
    await authz.upsert_role(
        ctx,
        "auditor",
        org_id,
        lambda role, org: [grant(org, OrgPermission.WORKSPACE_READ, role)],
    )
"""

from enum import Enum


class OrgPermission(str, Enum):
    """Role-grantable organization relations."""

    WORKSPACE_READ = "workspace_read"
    WORKSPACE_CREATE = "workspace_create"
    WORKSPACE_UPDATE = "workspace_update"
    WORKSPACE_DELETE = "workspace_delete"
    WORKSPACE_SSH = "workspace_ssh"
    TEMPLATE_READ = "template_read"
    TEMPLATE_CREATE = "template_create"
    TEMPLATE_UPDATE = "template_update"
    TEMPLATE_DELETE = "template_delete"
    MEMBER_READ = "member_read"
    MEMBER_UPDATE = "member_update"
    ROLE_ASSIGN = "role_assign"

    @classmethod
    def values(cls) -> list[str]:
        """Get all relation names as strings."""
        return [perm.value for perm in cls]
