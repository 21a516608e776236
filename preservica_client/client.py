"""Request core shared by all API clients.

Attaches a valid access token to every request, turns non-2xx responses into
ClientRequestError and decodes XML or JSON bodies.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, TypeVar
from xml.etree import ElementTree

import httpx

from preservica_client import pagination
from preservica_client.auth import TokenManager
from preservica_client.error import ClientRequestError, ResponseFormatError
from preservica_client.model.page import Page
from preservica_client.xml.elements import parse_document

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOKEN_HEADER = "Preservica-Access-Token"


def with_params(url: str, params: dict) -> str:
    return str(httpx.URL(url, params=params))


class Client:
    """Authenticated access to the API over an injected httpx client."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        tokens: TokenManager,
        max_pages: int | None = None,
        owns_http: bool = False,
    ) -> None:
        self._http = http
        self._tokens = tokens
        self._max_pages = max_pages
        self._owns_http = owns_http

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @property
    def tokens(self) -> TokenManager:
        return self._tokens

    async def api_base_url(self) -> str:
        return await self._tokens.api_base_url()

    async def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        token = await self._tokens.get_token()
        headers = {TOKEN_HEADER: token.token}
        if extra:
            headers.update(extra)
        return headers

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        content: str | bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one authenticated request and fail on any non-2xx status."""
        request_headers = await self._headers(headers)
        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(
                method, url, params=params, content=content, headers=request_headers
            )
        except httpx.RequestError as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ClientRequestError(method, url, None, str(e)) from e

        if not response.is_success:
            logger.error(
                "%s %s returned status=%d, body=%s",
                method,
                response.url,
                response.status_code,
                response.text,
            )
            raise ClientRequestError(method, str(response.url), response.status_code, response.text)
        return response

    async def send_xml(
        self,
        method: str,
        url: str,
        body: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> ElementTree.Element:
        headers = {"Content-Type": "application/xml"} if body is not None else None
        response = await self.send(method, url, params=params, content=body, headers=headers)
        return parse_document(response.content)

    async def submit_xml(self, method: str, url: str, body: str) -> None:
        """Send an XML body when the response content is not needed."""
        await self.send(method, url, content=body, headers={"Content-Type": "application/xml"})

    async def send_json(
        self, method: str, url: str, params: dict[str, Any] | None = None
    ) -> Any:
        response = await self.send(
            method, url, params=params, headers={"Accept": "application/json"}
        )
        try:
            return response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Response from {url} is not JSON") from e

    async def stream(
        self, url: str, consume: Callable[[AsyncIterator[bytes]], Awaitable[T]]
    ) -> T:
        """GET url and hand the body, chunk by chunk, to consume."""
        headers = await self._headers()
        try:
            async with self._http.stream("GET", url, headers=headers) as response:
                if not response.is_success:
                    body = (await response.aread()).decode(errors="replace")
                    raise ClientRequestError("GET", url, response.status_code, body)
                return await consume(response.aiter_bytes())
        except httpx.RequestError as e:
            raise ClientRequestError("GET", url, None, str(e)) from e

    async def fetch_xml(self, url: str) -> ElementTree.Element:
        return await self.send_xml("GET", url)

    async def fetch_json(self, url: str) -> Any:
        return await self.send_json("GET", url)

    async def drain(
        self,
        first_url: str,
        parse_page: Callable[[ElementTree.Element], Page[T]],
    ) -> list[T]:
        """Follow next-page links from first_url and collect every item."""
        return await pagination.drain(first_url, self.fetch_xml, parse_page, self._max_pages)

    async def drain_json(
        self,
        first_url: str,
        parse_page: Callable[[Any], Page[T]],
    ) -> list[T]:
        """Like drain, for JSON listings that carry their next link in the body."""
        return await pagination.drain(first_url, self.fetch_json, parse_page, self._max_pages)
