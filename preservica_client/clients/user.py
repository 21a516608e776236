"""User API: password changes and credential checks."""

import logging

import logfire
from pydantic import BaseModel, Field

from preservica_client.client import Client
from preservica_client.model.auth import Credentials

logger = logging.getLogger(__name__)

PASSWORD_PATH = "/api/user/password"


class ChangePasswordRequest(BaseModel):
    password: str
    new_password: str = Field(serialization_alias="newPassword")


class UserClient:
    def __init__(self, client: Client) -> None:
        self._client = client

    async def change_password(self, old_password: str, new_password: str) -> None:
        """Change the password of the user the client is logged in as."""
        with logfire.span("ChangePassword"):
            url = f"{await self._client.api_base_url()}{PASSWORD_PATH}"
            body = ChangePasswordRequest(password=old_password, new_password=new_password)
            await self._client.send(
                "PUT",
                url,
                content=body.model_dump_json(by_alias=True),
                headers={"Content-Type": "application/json"},
            )
            logger.info("Password changed")

    async def check_credentials(self, credentials: Credentials) -> None:
        """Log in with the given credentials, raising ClientRequestError if they are refused.

        The token obtained is discarded; the cached token is left untouched.
        """
        await self._client.tokens.login(credentials)
