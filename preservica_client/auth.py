"""Access-token lifecycle for the Preservica API.

Tokens are obtained by posting the stored credentials to the login endpoint
and are then reused from the cache for a fixed duration. The token itself is
never inspected; the cache TTL alone decides when a new login is needed.
"""

import asyncio
import logging
from datetime import timedelta

import httpx
import logfire

from preservica_client.error import ClientRequestError, ConfigurationError, ResponseFormatError
from preservica_client.model.auth import AuthToken, Credentials
from preservica_client.port.cache import Cache
from preservica_client.port.secret_store import SecretStore

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/accesstoken/login"


class TokenManager:
    """Supplies a valid access token, logging in only on a cache miss.

    Two managers configured alike share tokens through the cache, including
    across processes when the cache is file-backed. By default concurrent
    misses may each log in (the last write wins); with single_flight=True
    callers in the same event loop wait for one shared login instead.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        cache: Cache,
        secret_store: SecretStore,
        secret_name: str,
        cache_duration: timedelta,
        base_url: str | None = None,
        single_flight: bool = False,
    ) -> None:
        self._http = http
        self._cache = cache
        self._secret_store = secret_store
        self._secret_name = secret_name
        self._cache_duration = cache_duration
        self._base_url = base_url.rstrip("/") if base_url else None
        self._lock = asyncio.Lock() if single_flight else None

    async def api_base_url(self) -> str:
        """The API root, from configuration or else from the secret."""
        if self._base_url:
            return self._base_url

        key = f"base-url:{self._secret_name}"
        cached = await self._cache.get(key)
        if cached is not None:
            return cached.decode()

        credentials = await self._secret_store.fetch_secret(self._secret_name)
        if not credentials.api_base_url:
            raise ConfigurationError(
                f"No base URL configured and secret {self._secret_name} has no apiUrl",
                code="missing_base_url",
            )
        base_url = credentials.api_base_url.rstrip("/")
        await self._cache.put(key, base_url.encode(), self._cache_duration)
        return base_url

    async def token_cache_key(self) -> str:
        base_url = await self.api_base_url()
        duration_ms = int(self._cache_duration.total_seconds() * 1000)
        return f"token:{base_url}:{duration_ms}"

    async def get_token(self) -> AuthToken:
        """Return the cached token, logging in when there is none."""
        key = await self.token_cache_key()
        cached = await self._cache.get(key)
        if cached is not None:
            return AuthToken(token=cached.decode())

        if self._lock is None:
            return await self._refresh(key)

        async with self._lock:
            # Another caller may have logged in while we waited
            cached = await self._cache.get(key)
            if cached is not None:
                return AuthToken(token=cached.decode())
            return await self._refresh(key)

    async def _refresh(self, key: str) -> AuthToken:
        token = await self.login()
        await self._cache.put(key, token.token.encode(), self._cache_duration)
        return token

    async def login(self, credentials: Credentials | None = None) -> AuthToken:
        """Exchange credentials for a new token. Nothing is cached here.

        The stored credentials are used unless others are given.
        """
        base_url = await self.api_base_url()
        url = f"{base_url}{LOGIN_PATH}"
        if credentials is None:
            credentials = await self._secret_store.fetch_secret(self._secret_name)

        with logfire.span("TokenManager.login"):
            logger.info("Logging in to %s as %s", base_url, credentials.username)
            try:
                response = await self._http.post(
                    url,
                    data={"username": credentials.username, "password": credentials.password},
                    headers={"Accept": "application/json"},
                )
            except httpx.RequestError as e:
                logger.error("Login request to %s failed: %s", url, e)
                raise ClientRequestError("POST", url, None, str(e)) from e

            if not response.is_success:
                logger.error(
                    "Login failed: status=%d, body=%s", response.status_code, response.text
                )
                raise ClientRequestError("POST", url, response.status_code, response.text)

            try:
                payload = response.json()
            except ValueError as e:
                raise ResponseFormatError(f"Login response from {url} is not JSON") from e

            token = payload.get("token") if isinstance(payload, dict) else None
            if not isinstance(token, str) or not token:
                raise ResponseFormatError(f"Login response from {url} has no token field")

        return AuthToken(token=token)
