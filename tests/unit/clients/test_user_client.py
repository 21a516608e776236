import json
from urllib.parse import parse_qs

import httpx
import pytest

from preservica_client.clients import UserClient
from preservica_client.error import ClientRequestError
from preservica_client.model.auth import Credentials

PASSWORD_PATH = "/api/user/password"
LOGIN_PATH = "/api/accesstoken/login"


@pytest.fixture
def user_client(client) -> UserClient:
    return UserClient(client)


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_sends_old_and_new_password(self, user_client, stub_api):
        stub_api.add("PUT", PASSWORD_PATH, httpx.Response(200))

        await user_client.change_password("oldPassword", "newValidPassword")

        (sent,) = stub_api.requests_to(PASSWORD_PATH)
        assert sent.headers["Content-Type"] == "application/json"
        assert json.loads(sent.content) == {
            "password": "oldPassword",
            "newPassword": "newValidPassword",
        }

    @pytest.mark.asyncio
    async def test_error_status_raises(self, user_client, stub_api):
        stub_api.add("PUT", PASSWORD_PATH, httpx.Response(500, text="failed"))

        with pytest.raises(ClientRequestError) as exc_info:
            await user_client.change_password("old", "new")

        assert exc_info.value.status_code == 500
        assert exc_info.value.method == "PUT"


class TestCheckCredentials:
    @pytest.mark.asyncio
    async def test_logs_in_with_given_credentials(self, user_client, stub_api, secret_store):
        await user_client.check_credentials(Credentials(username="other", password="secret"))

        (login,) = stub_api.requests_to(LOGIN_PATH)
        assert parse_qs(login.content.decode()) == {"username": ["other"], "password": ["secret"]}
        assert secret_store.calls == 0

    @pytest.mark.asyncio
    async def test_refused_credentials_raise(self, user_client, stub_api):
        stub_api.login_response = httpx.Response(401, text="Unauthorized")

        with pytest.raises(ClientRequestError) as exc_info:
            await user_client.check_credentials(Credentials(username="other", password="wrong"))

        assert exc_info.value.status_code == 401
