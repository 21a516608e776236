"""Unit tests for client wiring."""

from datetime import datetime
from uuid import UUID

import httpx
import pytest

from preservica_client.clients import (
    AdminClient,
    ContentClient,
    EntityClient,
    ProcessMonitorClient,
    UserClient,
    WorkflowClient,
)
from preservica_client.config import ClientConfig, ProxyConfig
from preservica_client.error import PaginationLimitError
from preservica_client.factory import (
    create_admin_client,
    create_client,
    create_content_client,
    create_entity_client,
    create_http_client,
    create_process_monitor_client,
    create_user_client,
    create_workflow_client,
)
from preservica_client.model.entity import EntityType

REF = UUID("2d8a9935-3a1a-45ce-aadb-f01f2ddc9405")


@pytest.fixture
def config(stub_api, tmp_path) -> ClientConfig:
    return ClientConfig(
        secret_name="preservica-secret",
        base_url=stub_api.base_url,
        cache_dir=tmp_path / "cache",
    )


class TestCreateHttpClient:
    @pytest.mark.asyncio
    async def test_timeout_from_config(self, config):
        config = config.model_copy(update={"timeout": 12.0})

        async with create_http_client(config) as http:
            assert http.timeout == httpx.Timeout(12.0)

    @pytest.mark.asyncio
    async def test_accepts_proxy(self, config):
        config = config.model_copy(update={"proxy": ProxyConfig(host="proxy.local", port=3128)})

        async with create_http_client(config) as http:
            assert isinstance(http, httpx.AsyncClient)


class TestCreateClient:
    @pytest.mark.asyncio
    async def test_entity_client_end_to_end(self, config, http, cache, secret_store, stub_api):
        stub_api.add_xml(
            "GET",
            f"/api/entity/v7.0/structural-objects/{REF}",
            "<EntityResponse><StructuralObject><Title>Root</Title></StructuralObject></EntityResponse>",
        )

        client = create_entity_client(config, http=http, cache=cache, secret_store=secret_store)
        entity = await client.get_entity(REF, EntityType.STRUCTURAL_OBJECT)

        assert isinstance(client, EntityClient)
        assert entity.title == "Root"
        assert stub_api.logins == 1

    @pytest.mark.asyncio
    async def test_secrets_are_cached(self, config, http, cache, secret_store, stub_api):
        stub_api.add_xml("GET", f"/api/entity/v7.0/structural-objects/{REF}", "<E><StructuralObject/></E>")

        first = create_entity_client(config, http=http, cache=cache, secret_store=secret_store)
        await first.get_entity(REF, EntityType.STRUCTURAL_OBJECT)
        await cache.remove(f"token:{stub_api.base_url}:{15 * 60 * 1000}")
        second = create_entity_client(config, http=http, cache=cache, secret_store=secret_store)
        await second.get_entity(REF, EntityType.STRUCTURAL_OBJECT)

        assert stub_api.logins == 2
        assert secret_store.calls == 1

    @pytest.mark.asyncio
    async def test_max_pages_from_config(self, config, http, cache, secret_store, stub_api):
        path = "/api/entity/v7.0/entities/updated-since"
        stub_api.add_xml(
            "GET",
            path,
            f"<R><Entities/><Paging><Next>{stub_api.url(path)}</Next></Paging></R>",
        )
        config = config.model_copy(update={"max_pages": 3})
        client = create_entity_client(config, http=http, cache=cache, secret_store=secret_store)

        with pytest.raises(PaginationLimitError):
            await client.entities_updated_since(datetime(2024, 1, 1))

        assert len(stub_api.requests_to(path)) == 3

    @pytest.mark.asyncio
    async def test_injected_http_is_left_open(self, config, http, cache, secret_store):
        async with create_client(config, http=http, cache=cache, secret_store=secret_store):
            pass

        assert not http.is_closed

    @pytest.mark.asyncio
    async def test_owned_http_is_closed(self, config, cache, secret_store):
        client = create_client(config, cache=cache, secret_store=secret_store)
        async with client:
            pass

        assert client._http.is_closed

    def test_each_api_gets_its_client(self, config, http, cache, secret_store):
        kwargs = {"http": http, "cache": cache, "secret_store": secret_store}

        assert isinstance(create_content_client(config, **kwargs), ContentClient)
        assert isinstance(create_workflow_client(config, **kwargs), WorkflowClient)
        assert isinstance(create_admin_client(config, **kwargs), AdminClient)
        assert isinstance(create_process_monitor_client(config, **kwargs), ProcessMonitorClient)
        assert isinstance(create_user_client(config, **kwargs), UserClient)
