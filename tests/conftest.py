"""Shared fixtures: a stub Preservica API served through httpx.MockTransport."""

from collections.abc import Callable
from datetime import timedelta

import httpx
import pytest

from preservica_client.auth import TokenManager
from preservica_client.client import TOKEN_HEADER, Client
from preservica_client.infrastructure.cache import FileCache
from preservica_client.model.auth import Credentials
from preservica_client.port.secret_store import SecretStore

BASE_URL = "https://preservica.test"
LOGIN_PATH = "/api/accesstoken/login"

Handler = Callable[[httpx.Request], httpx.Response]


class StaticSecretStore(SecretStore):
    """Secret store returning fixed credentials and counting lookups."""

    def __init__(self, credentials: Credentials) -> None:
        self.credentials = credentials
        self.calls = 0

    async def fetch_secret(self, secret_name: str) -> Credentials:
        self.calls += 1
        return self.credentials


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubApi:
    """Routes requests by method and path to queued responses or handlers.

    The login endpoint issues "token-1", "token-2", ... and every other
    request must carry the most recently issued token.
    """

    def __init__(self, base_url: str = BASE_URL) -> None:
        self.base_url = base_url
        self.requests: list[httpx.Request] = []
        self.logins = 0
        self.login_response: httpx.Response | None = None
        self._routes: dict[tuple[str, str], list[httpx.Response | Handler]] = {}

    def add(self, method: str, path: str, *responses: httpx.Response | Handler) -> None:
        self._routes.setdefault((method, path), []).extend(responses)

    def add_xml(self, method: str, path: str, *bodies: str) -> None:
        self.add(method, path, *(xml_response(body) for body in bodies))

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    @property
    def token(self) -> str:
        return f"token-{self.logins}"

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == LOGIN_PATH:
            if self.login_response is not None:
                return _copy(self.login_response)
            self.logins += 1
            return httpx.Response(200, json={"token": self.token})

        if request.headers.get(TOKEN_HEADER) != self.token:
            return httpx.Response(401, text="Invalid token")

        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, text=f"No route for {request.method} {request.url.path}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        return response(request) if callable(response) else _copy(response)


def _copy(response: httpx.Response) -> httpx.Response:
    # A Response can only be sent once, so queued ones are replayed as copies
    return httpx.Response(
        response.status_code, headers=response.headers, content=response.content
    )


def xml_response(body: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code, content=body.encode(), headers={"Content-Type": "application/xml"}
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="test-user", password="test-password")


@pytest.fixture
def secret_store(credentials: Credentials) -> StaticSecretStore:
    return StaticSecretStore(credentials)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(tmp_path, clock: FakeClock) -> FileCache:
    return FileCache(tmp_path / "cache", clock=clock)


@pytest.fixture
def stub_api() -> StubApi:
    return StubApi()


@pytest.fixture
def http(stub_api: StubApi) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(stub_api.handle))


@pytest.fixture
def tokens(http, cache, secret_store, stub_api) -> TokenManager:
    return TokenManager(
        http=http,
        cache=cache,
        secret_store=secret_store,
        secret_name="preservica-secret",
        cache_duration=timedelta(minutes=15),
        base_url=stub_api.base_url,
    )


@pytest.fixture
def client(http, tokens) -> Client:
    return Client(http, tokens)
