"""Readers that turn API response documents into model objects.

Every reader takes the root element of a parsed response. Missing required
content raises XmlShapeError carrying the offending XML; optional content
comes back as None or an empty list.
"""

import re
from collections.abc import Callable
from datetime import datetime
from typing import TypeVar
from uuid import UUID
from xml.etree import ElementTree

from preservica_client.error import XmlShapeError
from preservica_client.model.bitstream import BitStreamInfo, Fixity, GenerationType
from preservica_client.model.entity import (
    Entity,
    EntityType,
    IdentifierResponse,
    RepresentationType,
    SecurityTag,
)
from preservica_client.model.event import EventAction
from preservica_client.model.page import Page
from preservica_client.xml.elements import (
    find_all,
    find_first,
    fragment,
    inner_xml,
    local_name,
    namespace_of,
    require_text,
    text_of,
)

Element = ElementTree.Element
T = TypeVar("T")

_NAMESPACE_VERSION = re.compile(r"v(\d+(?:\.\d+)?)/?$")


def _uuid(value: str | None, elem: Element, what: str) -> UUID:
    try:
        return UUID((value or "").strip())
    except ValueError as e:
        raise XmlShapeError(f"Invalid {what} {value!r}", fragment(elem)) from e


def _optional_uuid(value: str | None, elem: Element, what: str) -> UUID | None:
    if value is None or not value.strip():
        return None
    return _uuid(value, elem, what)


def _flag(value: str | None) -> bool:
    """Deleted markers: any non-empty value other than "false" is set."""
    if value is None:
        return False
    value = value.strip()
    return bool(value) and value.lower() != "false"


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


# =============================================================================
# Paging and listings
# =============================================================================


def next_page(elem: Element) -> str | None:
    """URL of the next page, or None on the last page."""
    url = text_of(elem, "Paging", "Next")
    if url is None or not url.strip():
        return None
    return url.strip()


def page(reader: Callable[[Element], list[T]]) -> Callable[[Element], Page[T]]:
    """Adapt a list reader into a page parser for the pagination engine."""

    def parse_page(elem: Element) -> Page[T]:
        return Page(items=tuple(reader(elem)), next_page_url=next_page(elem))

    return parse_page


def entities(elem: Element) -> list[Entity]:
    """Entities from an Entities/Entity listing (updated-since, by-identifier)."""
    result = []
    for node in find_all(elem, "Entities", "Entity"):
        result.append(
            Entity(
                ref=_uuid(node.get("ref"), node, "entity ref"),
                entity_type=EntityType.from_discriminant(node.get("type")),
                title=node.get("title"),
                description=node.get("description"),
                deleted=_flag(node.get("deleted")),
            )
        )
    return result


def entity_link_elements(elem: Element) -> list[Element]:
    return find_all(elem, "Links", "Link")


# =============================================================================
# Single entities
# =============================================================================


def entity_xml(ref: UUID, elem: Element, entity_type: EntityType) -> Element:
    """The StructuralObject/InformationObject/ContentObject node of a response."""
    node = find_first(elem, entity_type.value)
    if node is None:
        raise XmlShapeError(f"Entity not found for id {ref}", fragment(elem))
    return node


def entity(ref: UUID, elem: Element, entity_type: EntityType) -> Entity:
    node = entity_xml(ref, elem, entity_type)
    return Entity(
        ref=ref,
        entity_type=entity_type,
        title=_blank_to_none(text_of(node, "Title")),
        description=_blank_to_none(text_of(node, "Description")),
        deleted=_flag(text_of(node, "Deleted")),
        security_tag=SecurityTag.parse(text_of(node, "SecurityTag")),
        parent=_optional_uuid(text_of(node, "Parent"), node, "parent ref"),
    )


def child_text(elem: Element, parent: str, child: str) -> str:
    """Text of parent/child below the root, matching the child name case-insensitively."""
    for parent_node in find_all(elem, parent):
        for node in parent_node:
            if local_name(node.tag).lower() == child.lower():
                return node.text or ""
    raise XmlShapeError(f"Either {parent} or {child} does not exist on entity", fragment(elem))


def workflow_instance_child(elem: Element, child: str) -> str:
    text = text_of(elem, child)
    if text is None:
        raise XmlShapeError(
            f"'{child}' does not exist on the workflowInstance response.", fragment(elem)
        )
    return text


# =============================================================================
# Identifiers and events
# =============================================================================


def identifier_elements(elem: Element) -> list[Element]:
    return find_all(elem, "Identifiers", "Identifier")


def identifiers(elem: Element) -> list[IdentifierResponse]:
    return [
        IdentifierResponse(
            id=require_text(node, "ApiId"),
            name=require_text(node, "Type"),
            value=require_text(node, "Value"),
        )
        for node in identifier_elements(elem)
    ]


def event_action_elements(elem: Element) -> list[Element]:
    return find_all(elem, "EventActions", "EventAction")


def event_actions(elem: Element) -> list[EventAction]:
    """Event actions in document order, dated by their Event rather than the action."""
    result = []
    for node in event_action_elements(elem):
        event = find_first(node, "Event")
        if event is None:
            raise XmlShapeError("EventAction has no Event", fragment(node))
        date = require_text(event, "Date").strip()
        try:
            date_of_event = datetime.fromisoformat(date)
        except ValueError as e:
            raise XmlShapeError(f"Invalid event date {date!r}", fragment(node)) from e
        result.append(
            EventAction(
                event_ref=_uuid(text_of(event, "Ref"), node, "event ref"),
                event_type=event.get("type", ""),
                date_of_event=date_of_event,
            )
        )
    return result


# =============================================================================
# Generations and bitstreams
# =============================================================================


def generation_url(elem: Element) -> str:
    url = text_of(elem, "AdditionalInformation", "Generations")
    if url is None:
        raise XmlShapeError("Generation not found", fragment(elem))
    return url.strip()


def generation_urls(elem: Element, ref: UUID) -> list[str]:
    urls = [(node.text or "").strip() for node in find_all(elem, "Generations", "Generation")]
    if not urls:
        raise XmlShapeError(f"No generations found for entity {ref}", fragment(elem))
    return urls


def generation_element(elem: Element) -> list[Element]:
    return find_all(elem, "Generation")


def generation_type(elem: Element, ref: UUID) -> GenerationType:
    node = find_first(elem, "Generation")
    if node is None:
        raise XmlShapeError(f"Generation not found for entity {ref}", fragment(elem))
    if node.get("original", "").strip().lower() == "true":
        return GenerationType.ORIGINAL
    return GenerationType.DERIVED


def generation_version(url: str) -> int:
    """Generation number from the last path segment of a generation URL."""
    segment = url.rstrip("/").rsplit("/", 1)[-1]
    try:
        return int(segment)
    except ValueError as e:
        raise XmlShapeError("No generation number in generation URL", url) from e


def bitstream_urls(elem: Element) -> list[str]:
    return [(node.text or "").strip() for node in find_all(elem, "Bitstreams", "Bitstream")]


def bitstream_info(
    elem: Element,
    generation_version: int,
    generation_type: GenerationType,
    parent_ref: UUID | None = None,
) -> BitStreamInfo:
    bitstream = find_first(elem, "Bitstream")
    if bitstream is None:
        raise XmlShapeError("Bitstream not found", fragment(elem))

    file_size = require_text(bitstream, "FileSize").strip()
    try:
        size = int(file_size)
    except ValueError as e:
        raise XmlShapeError(f"Invalid file size {file_size!r}", fragment(bitstream)) from e

    fixities = frozenset(
        Fixity(
            algorithm=require_text(node, "FixityAlgorithmRef").strip(),
            value=require_text(node, "FixityValue").strip(),
        )
        for node in find_all(bitstream, "Fixities", "Fixity")
    )
    return BitStreamInfo(
        name=require_text(bitstream, "Filename").strip(),
        file_size=size,
        url=require_text(elem, "AdditionalInformation", "Content").strip(),
        fixities=fixities,
        generation_version=generation_version,
        generation_type=generation_type,
        parent_ref=parent_ref,
    )


# =============================================================================
# Metadata fragments
# =============================================================================


def fragment_urls(elem: Element) -> list[str]:
    nodes = find_all(elem, "AdditionalInformation", "Metadata", "Fragment")
    return [(node.text or "").strip() for node in nodes]


def fragments(elems: list[Element]) -> list[str]:
    """Serialized content of each metadata response, skipping empty ones."""
    contents = []
    for elem in elems:
        content = "".join(inner_xml(node) for node in find_all(elem, "MetadataContainer", "Content"))
        if content.strip():
            contents.append(content)
    if not contents:
        joined = "\n".join(fragment(elem) for elem in elems)
        raise XmlShapeError("No content found for elements", joined or None)
    return contents


# =============================================================================
# Representations
# =============================================================================


def representation_urls(
    elem: Element, representation_type: RepresentationType | None = None
) -> list[str]:
    """Representation URLs of an information object, optionally of one type."""
    return [
        (node.text or "").strip()
        for node in find_all(elem, "Representations", "Representation")
        if representation_type is None or node.get("type") == representation_type.value
    ]


def representation_element(elem: Element) -> list[Element]:
    return find_all(elem, "Representation")


def content_objects_from_representation(
    elem: Element, representation_type: RepresentationType, io_ref: UUID
) -> list[Entity]:
    result = []
    for representation in find_all(elem, "Representation"):
        declared = text_of(representation, "Type")
        if declared is not None and declared.strip() != representation_type.value:
            continue
        for node in find_all(representation, "ContentObjects", "ContentObject"):
            result.append(
                Entity(
                    ref=_uuid(node.text, representation, "content object ref"),
                    entity_type=EntityType.CONTENT_OBJECT,
                    parent=io_ref,
                )
            )
    return result


# =============================================================================
# Admin documents and versions
# =============================================================================


def existing_api_id(elem: Element, element_name: str, name: str) -> str | None:
    """ApiId of the admin document with the given element type and Name, if any."""
    for node in elem.iter():
        if local_name(node.tag) != element_name:
            continue
        if (text_of(node, "Name") or "").strip() == name:
            api_id = text_of(node, "ApiId")
            return api_id.strip() if api_id else None
    return None


def namespace_version(elem: Element) -> float:
    """Version embedded at the end of the root namespace, e.g. 7.7 for .../v7.7."""
    namespace = namespace_of(elem.tag)
    match = _NAMESPACE_VERSION.search(namespace) if namespace else None
    if match is None:
        raise XmlShapeError("No version found in the response namespace", fragment(elem))
    return float(match.group(1))
