"""Cache port used for credentials, tokens and resolved base URLs."""

from abc import abstractmethod
from datetime import timedelta
from typing import Protocol

from preservica_client.port import Port


class Cache(Port, Protocol):
    """Key/value store with per-entry time-to-live.

    Read faults must surface as misses; write and delete faults propagate.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the cached value, or None when absent, expired or unreadable."""
        ...

    @abstractmethod
    async def put(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store a value. A ttl of None caches it indefinitely."""
        ...

    @abstractmethod
    async def remove(self, key: str) -> None: ...

    @abstractmethod
    async def remove_all(self) -> None: ...
