"""SecretStore decorator that memoizes credentials in a Cache."""

import logging
from datetime import timedelta

from pydantic import ValidationError

from preservica_client.model.auth import Credentials
from preservica_client.port.cache import Cache
from preservica_client.port.secret_store import SecretStore

logger = logging.getLogger(__name__)


def secret_cache_key(secret_name: str) -> str:
    return f"secret:{secret_name}"


class CachingSecretStore(SecretStore):
    """Serves credentials from the cache while they are within their TTL."""

    def __init__(self, inner: SecretStore, cache: Cache, ttl: timedelta) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl = ttl

    async def fetch_secret(self, secret_name: str) -> Credentials:
        key = secret_cache_key(secret_name)
        cached = await self._cache.get(key)
        if cached is not None:
            try:
                return Credentials.model_validate_json(cached)
            except ValidationError:
                logger.debug("Ignoring unreadable cached credentials for %s", secret_name)

        credentials = await self._inner.fetch_secret(secret_name)
        await self._cache.put(key, credentials.model_dump_json().encode(), self._ttl)
        return credentials
