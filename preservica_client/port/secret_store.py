from abc import abstractmethod
from typing import Protocol

from preservica_client.model.auth import Credentials
from preservica_client.port import Port


class SecretStore(Port, Protocol):
    """Port for the external vault holding API credentials."""

    @abstractmethod
    async def fetch_secret(self, secret_name: str) -> Credentials:
        """Look up credentials by secret name.

        Raises:
            SecretFormatError: If the secret does not hold usable credentials
        """
        ...
