"""Wiring of configured clients.

Each create_* function builds the full stack for one API: an httpx client
(proxy and timeout from config), the file cache, the Secrets Manager store
behind a caching decorator, and the token manager.
"""

import httpx

from preservica_client.auth import TokenManager
from preservica_client.client import Client
from preservica_client.clients import (
    AdminClient,
    ContentClient,
    EntityClient,
    ProcessMonitorClient,
    UserClient,
    WorkflowClient,
)
from preservica_client.config import ClientConfig
from preservica_client.infrastructure.cache import FileCache
from preservica_client.infrastructure.secrets import AwsSecretsManagerStore, CachingSecretStore
from preservica_client.port.cache import Cache
from preservica_client.port.secret_store import SecretStore


def create_http_client(config: ClientConfig) -> httpx.AsyncClient:
    proxy = config.proxy.url if config.proxy else None
    return httpx.AsyncClient(timeout=config.timeout, proxy=proxy)


def create_client(
    config: ClientConfig,
    http: httpx.AsyncClient | None = None,
    cache: Cache | None = None,
    secret_store: SecretStore | None = None,
) -> Client:
    """Build the request core. Collaborators left as None come from config."""
    owns_http = http is None
    http = http or create_http_client(config)
    cache = cache or FileCache(config.cache_dir)
    secret_store = secret_store or AwsSecretsManagerStore(
        config.secrets_manager_endpoint, config.region
    )
    tokens = TokenManager(
        http=http,
        cache=cache,
        secret_store=CachingSecretStore(secret_store, cache, config.cache_duration),
        secret_name=config.secret_name,
        cache_duration=config.cache_duration,
        base_url=config.base_url,
        single_flight=config.single_flight_login,
    )
    return Client(http, tokens, max_pages=config.max_pages, owns_http=owns_http)


def create_entity_client(config: ClientConfig, **kwargs) -> EntityClient:
    return EntityClient(create_client(config, **kwargs))


def create_content_client(config: ClientConfig, **kwargs) -> ContentClient:
    return ContentClient(create_client(config, **kwargs))


def create_workflow_client(config: ClientConfig, **kwargs) -> WorkflowClient:
    return WorkflowClient(create_client(config, **kwargs))


def create_admin_client(config: ClientConfig, **kwargs) -> AdminClient:
    return AdminClient(create_client(config, **kwargs))


def create_process_monitor_client(config: ClientConfig, **kwargs) -> ProcessMonitorClient:
    return ProcessMonitorClient(create_client(config, **kwargs))


def create_user_client(config: ClientConfig, **kwargs) -> UserClient:
    return UserClient(create_client(config, **kwargs))
