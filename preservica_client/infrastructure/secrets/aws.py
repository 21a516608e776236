"""AWS Secrets Manager adapter for the SecretStore port."""

import asyncio
import json
import logging

import boto3

from preservica_client.error import SecretFormatError
from preservica_client.model.auth import Credentials
from preservica_client.port.secret_store import SecretStore

logger = logging.getLogger(__name__)


class AwsSecretsManagerStore(SecretStore):
    """Reads API credentials from a Secrets Manager secret.

    Two secret layouts are accepted:
    - {"username": "...", "password": "...", "apiUrl": "..."} (apiUrl optional)
    - {"<username>": "<password>"}, a single pair
    """

    def __init__(self, endpoint_url: str, region: str, client=None) -> None:
        self._client = client or boto3.client(
            "secretsmanager",
            endpoint_url=endpoint_url,
            region_name=region,
        )

    async def fetch_secret(self, secret_name: str) -> Credentials:
        logger.debug("Fetching secret %s", secret_name)
        response = await asyncio.to_thread(self._client.get_secret_value, SecretId=secret_name)
        return parse_secret(secret_name, response["SecretString"])


def parse_secret(secret_name: str, secret_string: str) -> Credentials:
    """Turn a secret string into Credentials."""
    try:
        data = json.loads(secret_string)
    except json.JSONDecodeError as e:
        raise SecretFormatError(f"Secret {secret_name} is not valid JSON") from e

    if not isinstance(data, dict):
        raise SecretFormatError(f"Secret {secret_name} must be a JSON object")

    if "username" in data and "password" in data:
        return Credentials(
            username=data["username"],
            password=data["password"],
            api_base_url=data.get("apiUrl"),
        )

    if len(data) == 1:
        ((username, password),) = data.items()
        if isinstance(password, str):
            return Credentials(username=username, password=password)

    raise SecretFormatError(f"Secret {secret_name} does not contain a username and password")
