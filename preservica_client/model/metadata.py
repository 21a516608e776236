from dataclasses import dataclass, field
from xml.etree.ElementTree import Element


@dataclass(frozen=True)
class EntityMetadata:
    """Raw XML describing an entity and everything attached to it."""

    entity_node: Element
    identifiers: list[Element]
    links: list[Element]
    metadata_nodes: list[Element]
    event_actions: list[Element]


@dataclass(frozen=True)
class IoMetadata(EntityMetadata):
    representations: list[Element] = field(default_factory=list)


@dataclass(frozen=True)
class CoMetadata(EntityMetadata):
    generation_nodes: list[Element] = field(default_factory=list)
    bitstream_nodes: list[Element] = field(default_factory=list)
