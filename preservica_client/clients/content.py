"""Content API: full-text and metadata search."""

import logging
from uuid import UUID

import logfire
from pydantic import BaseModel, Field, ValidationError

from preservica_client.client import Client
from preservica_client.error import ResponseFormatError
from preservica_client.model.entity import Entity, EntityType
from preservica_client.model.search import SearchQuery

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/content/search"


class SearchResponseValue(BaseModel):
    object_ids: list[str] = Field(alias="objectIds")
    total_hits: int = Field(alias="totalHits")


class SearchResponse(BaseModel):
    success: bool
    value: SearchResponseValue


def entity_from_object_id(object_id: str) -> Entity:
    """Entity for a search hit such as "sdb:IO|<uuid>"."""
    kind, _, ref = object_id.partition("|")
    try:
        entity_ref = UUID(ref)
    except ValueError as e:
        raise ResponseFormatError(f"Unexpected search result id {object_id!r}") from e
    return Entity(ref=entity_ref, entity_type=EntityType.from_discriminant(kind.split(":")[-1]))


class ContentClient:
    def __init__(self, client: Client) -> None:
        self._client = client

    async def search_entities(self, query: SearchQuery, max: int = 100) -> list[Entity]:
        """All entities matching the query.

        Results are requested `max` at a time until a page comes back empty.
        """
        url = f"{await self._client.api_base_url()}{SEARCH_PATH}"
        params = {
            "q": query.model_dump_json(),
            "max": max,
            "metadata": ",".join(field.name for field in query.fields),
        }

        with logfire.span("SearchEntities"):
            object_ids: list[str] = []
            start = 0
            while True:
                payload = await self._client.send_json("GET", url, params={**params, "start": start})
                try:
                    page = SearchResponse.model_validate(payload)
                except ValidationError as e:
                    raise ResponseFormatError(f"Unexpected search response from {url}") from e
                if not page.value.object_ids:
                    break
                object_ids.extend(page.value.object_ids)
                start += max

            logger.info("Search %r matched %d entities", query.q, len(object_ids))
            return [entity_from_object_id(object_id) for object_id in object_ids]
