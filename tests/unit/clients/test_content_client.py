import json
from uuid import UUID

import httpx
import pytest

from preservica_client.clients import ContentClient
from preservica_client.clients.content import entity_from_object_id
from preservica_client.error import ResponseFormatError
from preservica_client.model.entity import EntityType
from preservica_client.model.search import SearchField, SearchQuery

SEARCH_PATH = "/api/content/search"
IO_REF = "8a8b1582-aa5f-4eb0-9c5d-2c16049fcb91"
SO_REF = "2d8a9935-3a1a-45ce-aadb-f01f2ddc9405"
CO_REF = "a9e1cae8-ea06-4157-8dd4-82d0525b031c"


def search_result(*object_ids: str, total: int = 3) -> dict:
    return {"success": True, "value": {"objectIds": list(object_ids), "totalHits": total}}


@pytest.fixture
def content_client(client) -> ContentClient:
    return ContentClient(client)


class TestEntityFromObjectId:
    def test_maps_discriminant(self):
        entity = entity_from_object_id(f"sdb:IO|{IO_REF}")

        assert entity.ref == UUID(IO_REF)
        assert entity.entity_type == EntityType.INFORMATION_OBJECT

    def test_unknown_kind_has_no_type(self):
        assert entity_from_object_id(f"sdb:XX|{IO_REF}").entity_type is None

    def test_malformed_id_raises(self):
        with pytest.raises(ResponseFormatError, match="Unexpected search result id"):
            entity_from_object_id("sdb:IO|not-a-uuid")


class TestSearchEntities:
    @pytest.mark.asyncio
    async def test_pages_until_empty(self, content_client, stub_api):
        pages = {
            "0": search_result(f"sdb:IO|{IO_REF}", f"sdb:SO|{SO_REF}"),
            "2": search_result(f"sdb:CO|{CO_REF}"),
        }

        def search(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=pages.get(request.url.params["start"], search_result()))

        stub_api.add("GET", SEARCH_PATH, search)
        query = SearchQuery(q="letters", fields=[SearchField(name="xip.title", values=["a"])])

        entities = await content_client.search_entities(query, max=2)

        assert [str(entity.ref) for entity in entities] == [IO_REF, SO_REF, CO_REF]
        assert [entity.entity_type for entity in entities] == [
            EntityType.INFORMATION_OBJECT,
            EntityType.STRUCTURAL_OBJECT,
            EntityType.CONTENT_OBJECT,
        ]

        requests = stub_api.requests_to(SEARCH_PATH)
        assert [request.url.params["start"] for request in requests] == ["0", "2", "4"]
        params = requests[0].url.params
        assert params["max"] == "2"
        assert params["metadata"] == "xip.title"
        assert json.loads(params["q"]) == {
            "q": "letters",
            "fields": [{"name": "xip.title", "values": ["a"]}],
        }

    @pytest.mark.asyncio
    async def test_no_hits(self, content_client, stub_api):
        stub_api.add("GET", SEARCH_PATH, httpx.Response(200, json=search_result(total=0)))

        assert await content_client.search_entities(SearchQuery(q="nothing")) == []
        assert len(stub_api.requests_to(SEARCH_PATH)) == 1

    @pytest.mark.asyncio
    async def test_unexpected_payload_raises(self, content_client, stub_api):
        stub_api.add("GET", SEARCH_PATH, httpx.Response(200, json={"success": True}))

        with pytest.raises(ResponseFormatError, match="Unexpected search response"):
            await content_client.search_entities(SearchQuery(q="broken"))
