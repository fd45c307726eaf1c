"""Relationship tuple value objects.

A relationship is a directed edge in the authorization graph meaning
"subject holds relation on resource". Text form:

    resourceType:resourceId#relation@subjectType:subjectId[#subjectRelation]

Example:
    >>> rel = RelationshipTuple.parse("workspace:dogfood#view@user:root")
    >>> rel.resource
    ObjectRef(object_type='workspace', object_id='dogfood')
    >>> str(rel)
    'workspace:dogfood#view@user:root'
"""

import re
from dataclasses import dataclass

_TUPLE_PATTERN = re.compile(
    r"^(?P<resource_type>[^:#@\s]+):(?P<resource_id>[^:#@\s]+)"
    r"#(?P<relation>[^:#@\s]+)"
    r"@(?P<subject_type>[^:#@\s]+):(?P<subject_id>[^:#@\s]+)"
    r"(?:#(?P<subject_relation>[^:#@\s]+))?$"
)


@dataclass(frozen=True, slots=True)
class ObjectRef:
    """Typed reference to an object in the graph.

    Attributes:
        object_type: Definition name in the schema (organization, org_role, ...).
        object_id: Object identifier.
    """

    object_type: str
    object_id: str

    def __str__(self) -> str:
        return f"{self.object_type}:{self.object_id}"


@dataclass(frozen=True, slots=True)
class SubjectRef:
    """Subject of a relationship, optionally a subject set (object#relation)."""

    object: ObjectRef
    relation: str | None = None

    def __str__(self) -> str:
        if self.relation:
            return f"{self.object}#{self.relation}"
        return str(self.object)


@dataclass(frozen=True, slots=True)
class RelationshipTuple:
    """Immutable relationship tuple.

    Attributes:
        resource: Object the relation is held on.
        relation: Relation name declared on the resource's definition.
        subject: Subject holding the relation.
    """

    resource: ObjectRef
    relation: str
    subject: SubjectRef

    def __str__(self) -> str:
        return f"{self.resource}#{self.relation}@{self.subject}"

    @classmethod
    def parse(cls, text: str) -> "RelationshipTuple":
        """Parse the text form of a relationship.

        Args:
            text: Tuple in ``type:id#relation@type:id[#relation]`` form.

        Returns:
            RelationshipTuple: Parsed tuple.

        Raises:
            ValueError: If text is not a well-formed tuple.
        """
        match = _TUPLE_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid relationship: {text!r}")
        return cls(
            resource=ObjectRef(match["resource_type"], match["resource_id"]),
            relation=match["relation"],
            subject=SubjectRef(
                object=ObjectRef(match["subject_type"], match["subject_id"]),
                relation=match["subject_relation"],
            ),
        )


def relationship(
    resource: ObjectRef,
    relation: str,
    subject: ObjectRef,
    subject_relation: str | None = None,
) -> RelationshipTuple:
    """Build a relationship tuple from typed references."""
    return RelationshipTuple(
        resource=resource,
        relation=relation,
        subject=SubjectRef(object=subject, relation=subject_relation),
    )
