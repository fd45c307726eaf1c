"""Tuple constructors for the bundled schema.

Pure functions taking typed identifiers and returning immutable references
and tuples. They are the only place that knows how object types and
relations from schema.zed are spelled.

Usage:
    org = organization(org_id)
    admin = org_role("admin")
    rels = [
        role_in_organization(admin, org),
        grant(org, OrgPermission.WORKSPACE_READ, admin),
        role_member(admin, user(user_id)),
    ]
"""

from uuid import UUID

from relauthz.domain.enums import ObjectType, OrgPermission, Relation
from relauthz.domain.value_objects.relationship import (
    ObjectRef,
    RelationshipTuple,
    relationship,
)


def user(user_id: UUID) -> ObjectRef:
    return ObjectRef(ObjectType.USER.value, str(user_id))


def group(group_id: UUID) -> ObjectRef:
    return ObjectRef(ObjectType.GROUP.value, str(group_id))


def organization(organization_id: UUID) -> ObjectRef:
    return ObjectRef(ObjectType.ORGANIZATION.value, str(organization_id))


def org_role(role_name: str) -> ObjectRef:
    """Reference a custom organization role.

    Role names are global object ids: two organizations using the same
    role name address the same org_role object.
    """
    return ObjectRef(ObjectType.ORG_ROLE.value, role_name)


def workspace(workspace_id: UUID | str) -> ObjectRef:
    return ObjectRef(ObjectType.WORKSPACE.value, str(workspace_id))


def template(template_id: UUID | str) -> ObjectRef:
    return ObjectRef(ObjectType.TEMPLATE.value, str(template_id))


def role_in_organization(role: ObjectRef, org: ObjectRef) -> RelationshipTuple:
    """org_role:<name>#organization@organization:<id>"""
    return relationship(role, Relation.ORGANIZATION.value, org)


def grant(
    org: ObjectRef, permission: OrgPermission | str, role: ObjectRef
) -> RelationshipTuple:
    """organization:<id>#<permission>@org_role:<name>#has_role"""
    relation = permission.value if isinstance(permission, OrgPermission) else permission
    return relationship(org, relation, role, Relation.HAS_ROLE.value)


def role_member(role: ObjectRef, member: ObjectRef) -> RelationshipTuple:
    """org_role:<name>#member@user:<id> (or group:<id>#member)."""
    subject_relation = (
        Relation.MEMBER.value if member.object_type == ObjectType.GROUP.value else None
    )
    return relationship(role, Relation.MEMBER.value, member, subject_relation)


def organization_member(org: ObjectRef, member: ObjectRef) -> RelationshipTuple:
    return relationship(org, Relation.MEMBER.value, member)


def resource_in_organization(resource: ObjectRef, org: ObjectRef) -> RelationshipTuple:
    """Attach a workspace or template to its organization."""
    return relationship(resource, Relation.ORGANIZATION.value, org)


def resource_owner(resource: ObjectRef, owner: ObjectRef) -> RelationshipTuple:
    return relationship(resource, Relation.OWNER.value, owner)
