from enum import StrEnum
from uuid import UUID

from preservica_client.model.value import ValueObject


class GenerationType(StrEnum):
    ORIGINAL = "Original"
    DERIVED = "Derived"


class Fixity(ValueObject):
    """A checksum algorithm and value attesting to bitstream integrity."""

    algorithm: str  # e.g. "SHA1", "MD5"
    value: str


class BitStreamInfo(ValueObject):
    name: str
    file_size: int
    url: str
    fixities: frozenset[Fixity]
    generation_version: int
    generation_type: GenerationType
    parent_ref: UUID | None = None
