"""Domain enums package.

Usage:
    from relauthz.domain.enums import ObjectType, OrgPermission, Relation
"""

from relauthz.domain.enums.object_type import ObjectType, Relation
from relauthz.domain.enums.org_permission import OrgPermission
from relauthz.domain.enums.permissionship import Permissionship

__all__ = ["ObjectType", "OrgPermission", "Permissionship", "Relation"]
