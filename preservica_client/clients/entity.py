"""Entity API: structural, information and content objects."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime
from typing import TypeVar
from uuid import UUID
from xml.etree import ElementTree

import logfire

from preservica_client.client import Client, with_params
from preservica_client.error import RequestValidationError, ResponseFormatError, XmlShapeError
from preservica_client.model.bitstream import BitStreamInfo
from preservica_client.model.entity import (
    AddEntityRequest,
    Entity,
    EntityType,
    Identifier,
    IdentifierResponse,
    RepresentationType,
    UpdateEntityRequest,
)
from preservica_client.model.event import EventAction
from preservica_client.model.metadata import CoMetadata, EntityMetadata, IoMetadata
from preservica_client.xml import build, parse
from preservica_client.xml.elements import parse_document

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_VERSION = "7.0"
ENTITY_API_PATH = f"/api/entity/v{API_VERSION}"

# Sub-listings (identifiers, links, event actions) are drained from the start
LISTING_PARAMS = {"max": 1000, "start": 0}


def format_date(value: datetime) -> str:
    """Millisecond ISO-8601 with a Z suffix for UTC, as the updated-since filter expects."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.isoformat(timespec="milliseconds")
    return text.removesuffix("+00:00") + "Z" if text.endswith("+00:00") else text


def _require_path(entity: Entity) -> str:
    if entity.path is None:
        raise RequestValidationError(
            f"No path found for entity id {entity.ref}. Could this entity have been deleted?"
        )
    return entity.path


def _require_parent(entity_type: EntityType, parent_ref: UUID | None) -> None:
    if entity_type != EntityType.STRUCTURAL_OBJECT and parent_ref is None:
        raise RequestValidationError(
            "You must pass in the parent ref if you would like to add/update a non-structural object."
        )


def _representation_segments(url: str) -> tuple[RepresentationType, int]:
    """Type and index from a URL ending in /representations/<type>/<index>."""
    try:
        *_, type_segment, index_segment = url.rstrip("/").split("/")
        return RepresentationType(type_segment), int(index_segment)
    except ValueError as e:
        raise XmlShapeError(f"Unexpected representation URL {url}") from e


class EntityClient:
    """Reads and writes entities, their identifiers, events and bitstreams."""

    def __init__(self, client: Client) -> None:
        self._client = client

    async def _api_url(self) -> str:
        return f"{await self._client.api_base_url()}{ENTITY_API_PATH}"

    async def _entity_url(self, path: str, ref: UUID) -> str:
        return f"{await self._api_url()}/{path}/{ref}"

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_entity(self, ref: UUID, entity_type: EntityType) -> Entity:
        url = await self._entity_url(entity_type.path, ref)
        response = await self._client.send_xml("GET", url)
        return parse.entity(ref, response, entity_type)

    async def entities_updated_since(
        self,
        since: datetime,
        start: int = 0,
        max_entries: int = 1000,
    ) -> list[Entity]:
        """Every entity changed after `since`, following all result pages."""
        with logfire.span("EntitiesUpdatedSince"):
            params = {"date": format_date(since), "max": max_entries, "start": start}
            url = with_params(f"{await self._api_url()}/entities/updated-since", params)
            updated = await self._client.drain(url, parse.page(parse.entities))
            logger.info("Found %d entities updated since %s", len(updated), params["date"])
            return updated

    async def entities_by_identifier(self, identifier: Identifier) -> list[Entity]:
        """Entities carrying the identifier, each fetched in full."""
        params = {"type": identifier.name, "value": identifier.value}
        url = with_params(f"{await self._api_url()}/entities/by-identifier", params)
        matches = await self._client.drain(url, parse.page(parse.entities))

        result = []
        for match in matches:
            if match.entity_type is None:
                raise ResponseFormatError(f"No entity type found for entity {match.ref}")
            result.append(await self.get_entity(match.ref, match.entity_type))
        return result

    async def entity_event_actions(
        self,
        entity: Entity,
        start: int = 0,
        max_entries: int = 1000,
    ) -> list[EventAction]:
        """Event actions for an entity, most recent first."""
        path = _require_path(entity)
        url = with_params(
            f"{await self._entity_url(path, entity.ref)}/event-actions",
            {"max": max_entries, "start": start},
        )
        actions = await self._client.drain(url, parse.page(parse.event_actions))
        return list(reversed(actions))

    async def get_entity_identifiers(self, entity: Entity) -> list[IdentifierResponse]:
        path = _require_path(entity)
        url = f"{await self._entity_url(path, entity.ref)}/identifiers"
        return await self._client.drain(url, parse.page(parse.identifiers))

    async def get_urls_to_io_representations(
        self,
        io_ref: UUID,
        representation_type: RepresentationType | None = None,
    ) -> list[str]:
        url = f"{await self._entity_url(EntityType.INFORMATION_OBJECT.path, io_ref)}/representations"
        response = await self._client.send_xml("GET", url)
        return parse.representation_urls(response, representation_type)

    async def _io_representation(
        self, io_ref: UUID, representation_type: RepresentationType, index: int
    ) -> ElementTree.Element:
        base = await self._entity_url(EntityType.INFORMATION_OBJECT.path, io_ref)
        url = f"{base}/representations/{representation_type.value}/{index}"
        return await self._client.send_xml("GET", url)

    async def get_content_objects_from_representation(
        self,
        io_ref: UUID,
        representation_type: RepresentationType,
        index: int,
    ) -> list[Entity]:
        response = await self._io_representation(io_ref, representation_type, index)
        return parse.content_objects_from_representation(response, representation_type, io_ref)

    async def _generation_responses(
        self, generations_url: str, ref: UUID
    ) -> list[tuple[str, ElementTree.Element]]:
        generations = await self._client.send_xml("GET", generations_url)
        return [
            (url, await self._client.send_xml("GET", url))
            for url in parse.generation_urls(generations, ref)
        ]

    async def _bitstream_responses(self, generation: ElementTree.Element) -> list[ElementTree.Element]:
        return [await self._client.send_xml("GET", url) for url in parse.bitstream_urls(generation)]

    async def get_bitstream_info(self, content_object_ref: UUID) -> list[BitStreamInfo]:
        """Bitstreams of every generation of a content object."""
        with logfire.span("GetBitstreamInfo"):
            url = await self._entity_url(EntityType.CONTENT_OBJECT.path, content_object_ref)
            response = await self._client.send_xml("GET", url)
            content_object = parse.entity(content_object_ref, response, EntityType.CONTENT_OBJECT)
            generations_url = parse.generation_url(response)

            result = []
            for generation_url, generation in await self._generation_responses(
                generations_url, content_object_ref
            ):
                version = parse.generation_version(generation_url)
                generation_type = parse.generation_type(generation, content_object_ref)
                for bitstream in await self._bitstream_responses(generation):
                    result.append(
                        parse.bitstream_info(
                            bitstream, version, generation_type, content_object.parent
                        )
                    )
            return result

    async def _drain_elements(
        self, url: str, reader: Callable[[ElementTree.Element], list[ElementTree.Element]]
    ) -> list[ElementTree.Element]:
        return await self._client.drain(url, parse.page(reader))

    async def metadata_for_entity(self, entity: Entity) -> EntityMetadata:
        """Raw XML for an entity with its identifiers, links, metadata and events.

        Content objects also carry their generations and bitstreams, information
        objects their representations.
        """
        path = _require_path(entity)
        if entity.entity_type is None:
            raise RequestValidationError(f"No entity type found for entity {entity.ref}")

        with logfire.span("MetadataForEntity"):
            entity_url = await self._entity_url(path, entity.ref)
            entity_info = await self._client.send_xml("GET", entity_url)
            entity_node = parse.entity_xml(entity.ref, entity_info, entity.entity_type)

            identifiers = await self._drain_elements(
                f"{entity_url}/identifiers", parse.identifier_elements
            )
            links = await self._drain_elements(
                with_params(f"{entity_url}/links", LISTING_PARAMS), parse.entity_link_elements
            )

            fragment_responses = [
                await self._client.send_xml("GET", url) for url in parse.fragment_urls(entity_info)
            ]
            metadata_nodes = (
                [
                    parse_document(f"<Metadata>{content}</Metadata>")
                    for content in parse.fragments(fragment_responses)
                ]
                if fragment_responses
                else []
            )

            event_actions = await self._drain_elements(
                with_params(f"{entity_url}/event-actions", LISTING_PARAMS),
                parse.event_action_elements,
            )

            if entity.entity_type == EntityType.CONTENT_OBJECT:
                generation_nodes: list[ElementTree.Element] = []
                bitstream_nodes: list[ElementTree.Element] = []
                for _, generation in await self._generation_responses(
                    f"{entity_url}/generations", entity.ref
                ):
                    generation_nodes.extend(parse.generation_element(generation))
                    bitstream_nodes.extend(await self._bitstream_responses(generation))
                return CoMetadata(
                    entity_node=entity_node,
                    identifiers=identifiers,
                    links=links,
                    metadata_nodes=metadata_nodes,
                    event_actions=event_actions,
                    generation_nodes=generation_nodes,
                    bitstream_nodes=bitstream_nodes,
                )

            if entity.entity_type == EntityType.INFORMATION_OBJECT:
                representations: list[ElementTree.Element] = []
                for url in await self.get_urls_to_io_representations(entity.ref):
                    representation_type, index = _representation_segments(url)
                    response = await self._io_representation(entity.ref, representation_type, index)
                    representations.extend(parse.representation_element(response))
                return IoMetadata(
                    entity_node=entity_node,
                    identifiers=identifiers,
                    links=links,
                    metadata_nodes=metadata_nodes,
                    event_actions=event_actions,
                    representations=representations,
                )

            return EntityMetadata(
                entity_node=entity_node,
                identifiers=identifiers,
                links=links,
                metadata_nodes=metadata_nodes,
                event_actions=event_actions,
            )

    async def stream_bitstream_content(
        self, url: str, consume: Callable[[AsyncIterator[bytes]], Awaitable[T]]
    ) -> T:
        """Stream a bitstream's content URL into consume and return its result."""
        return await self._client.stream(url, consume)

    async def get_namespace_version(self, endpoint: str) -> float:
        """API version advertised by the namespace of an entity endpoint's response."""
        base_url = await self._client.api_base_url()
        response = await self._client.send_xml("GET", f"{base_url}/api/entity/{endpoint}")
        return parse.namespace_version(response)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def add_entity(self, request: AddEntityRequest) -> UUID:
        """Create an entity and return the ref the API assigned to it."""
        if request.entity_type == EntityType.CONTENT_OBJECT:
            raise RequestValidationError("You currently cannot create a content object via the API.")
        _require_parent(request.entity_type, request.parent_ref)

        with logfire.span("AddEntity"):
            body = build.entity_request(
                request.entity_type,
                request.title,
                request.security_tag,
                ref=request.ref,
                description=request.description,
                parent_ref=request.parent_ref,
                wrap_in_xip=request.entity_type == EntityType.INFORMATION_OBJECT,
            )
            url = f"{await self._api_url()}/{request.entity_type.path}"
            response = await self._client.send_xml("POST", url, body)
            ref = parse.child_text(response, request.entity_type.value, "Ref").strip()
            logfire.info("Entity added", ref=ref, entity_type=request.entity_type.value)
            return UUID(ref)

    async def update_entity(self, request: UpdateEntityRequest) -> None:
        _require_parent(request.entity_type, request.parent_ref)

        with logfire.span("UpdateEntity"):
            body = build.entity_request(
                request.entity_type,
                request.title,
                request.security_tag,
                ref=request.ref,
                description=request.description,
                parent_ref=request.parent_ref,
            )
            url = await self._entity_url(request.entity_type.path, request.ref)
            await self._client.submit_xml("PUT", url, body)
            logfire.info("Entity updated", ref=str(request.ref))

    async def add_identifier_for_entity(
        self, ref: UUID, entity_type: EntityType, identifier: Identifier
    ) -> None:
        url = f"{await self._entity_url(entity_type.path, ref)}/identifiers"
        body = build.identifier_request(identifier.name, identifier.value)
        await self._client.submit_xml("POST", url, body)
        logger.info("Added identifier %s to %s", identifier.name, ref)

    async def update_entity_identifiers(
        self, entity: Entity, identifiers: list[IdentifierResponse]
    ) -> list[IdentifierResponse]:
        path = _require_path(entity)
        base = await self._entity_url(path, entity.ref)
        for identifier in identifiers:
            body = build.identifier_request(identifier.name, identifier.value)
            await self._client.submit_xml("PUT", f"{base}/identifiers/{identifier.id}", body)
        return identifiers
