from enum import StrEnum
from uuid import UUID

from preservica_client.model.value import ValueObject


class EntityType(StrEnum):
    """Structural classification of a node in the content hierarchy.

    The value is the XML element name the API uses for the entity.
    """

    STRUCTURAL_OBJECT = "StructuralObject"
    INFORMATION_OBJECT = "InformationObject"
    CONTENT_OBJECT = "ContentObject"

    @property
    def path(self) -> str:
        """URL path segment for this type (e.g. "information-objects")."""
        return _PATHS[self]

    @property
    def short(self) -> str:
        """Two-letter discriminant used in listing responses (e.g. "IO")."""
        return _SHORT_NAMES[self]

    @classmethod
    def from_discriminant(cls, value: str | None) -> "EntityType | None":
        """Resolve a two-letter or full-word discriminant.

        Returns None for anything unrecognised; callers treat that as an
        entity of unknown type rather than guessing one.
        """
        if not value:
            return None
        value = value.strip()
        for entity_type in cls:
            if value in (entity_type.value, entity_type.short):
                return entity_type
        return None


_PATHS = {
    EntityType.STRUCTURAL_OBJECT: "structural-objects",
    EntityType.INFORMATION_OBJECT: "information-objects",
    EntityType.CONTENT_OBJECT: "content-objects",
}

_SHORT_NAMES = {
    EntityType.STRUCTURAL_OBJECT: "SO",
    EntityType.INFORMATION_OBJECT: "IO",
    EntityType.CONTENT_OBJECT: "CO",
}


class SecurityTag(StrEnum):
    OPEN = "open"
    CLOSED = "closed"

    @classmethod
    def parse(cls, value: str | None) -> "SecurityTag | None":
        """Map an API security tag, returning None for custom or missing tags."""
        if value is None:
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


class RepresentationType(StrEnum):
    ACCESS = "Access"
    PRESERVATION = "Preservation"


class Entity(ValueObject):
    """A structural, information or content object."""

    ref: UUID
    entity_type: EntityType | None = None
    title: str | None = None
    description: str | None = None
    deleted: bool = False
    security_tag: SecurityTag | None = None
    parent: UUID | None = None

    @property
    def path(self) -> str | None:
        """URL path segment, or None when the entity type is unknown."""
        return self.entity_type.path if self.entity_type else None


class Identifier(ValueObject):
    name: str
    value: str


class IdentifierResponse(ValueObject):
    """An identifier that has been persisted and carries its API id."""

    id: str
    name: str
    value: str


class AddEntityRequest(ValueObject):
    """Details of an entity to create. The API generates a ref when none is given."""

    ref: UUID | None = None
    title: str
    description: str | None = None
    entity_type: EntityType
    security_tag: SecurityTag
    parent_ref: UUID | None = None


class UpdateEntityRequest(ValueObject):
    ref: UUID
    title: str
    description: str | None = None
    entity_type: EntityType
    security_tag: SecurityTag
    parent_ref: UUID | None = None
