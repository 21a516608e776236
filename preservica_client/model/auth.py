from pydantic import Field

from preservica_client.model.value import ValueObject


class Credentials(ValueObject):
    """API login details read from the secret store."""

    username: str
    password: str = Field(repr=False)
    api_base_url: str | None = None


class AuthToken(ValueObject):
    """Opaque access token. Its validity is governed by the cache TTL only."""

    token: str = Field(repr=False)
