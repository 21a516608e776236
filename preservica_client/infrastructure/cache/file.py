"""Filesystem implementation of the Cache port.

Each key maps to one value file in a shared scratch directory plus two sidecar
files holding its metadata as ASCII milliseconds:

    cache_<sha256(key)>             value bytes
    cache_<sha256(key)>.entry-time  when the value was written
    cache_<sha256(key)>.ttl         time-to-live, 0 for no expiry

The directory outlives the process, so cached tokens and credentials survive
client re-creation within their TTL. Entries are overwritten by key and never
locked; staleness is decided by timestamp comparison alone.
"""

import hashlib
import logging
import math
import tempfile
import time
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path

from preservica_client.port.cache import Cache

logger = logging.getLogger(__name__)

TTL_SUFFIX = ".ttl"
ENTRY_TIME_SUFFIX = ".entry-time"


def default_cache_dir() -> Path:
    """Shared scratch directory used when none is configured."""
    return Path(tempfile.gettempdir()) / "preservica-client"


class FileCache(Cache):
    """TTL cache backed by one file per key."""

    def __init__(
        self,
        directory: Path | str | None = None,
        prefix: str = "cache_",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.directory = Path(directory) if directory else default_cache_dir()
        self.directory.mkdir(parents=True, exist_ok=True)
        self._prefix = prefix
        self._clock = clock

    def path_for(self, key: str) -> Path:
        """Value file for a key. Hashing keeps URLs and other keys filesystem-safe."""
        digest = hashlib.sha256(key.encode()).hexdigest()
        return self.directory / f"{self._prefix}{digest}"

    async def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            value = path.read_bytes()
            ttl = _read_millis(_sidecar(path, TTL_SUFFIX))
            entry_time = _read_millis(_sidecar(path, ENTRY_TIME_SUFFIX))
        except (OSError, ValueError) as e:
            # Absent, half-written or corrupt entries are all misses
            logger.debug("Cache miss for %s: %s", key, e)
            return None

        if ttl > 0 and self._now_millis() - entry_time >= ttl:
            logger.debug("Cache entry for %s expired", key)
            return None
        return value

    async def put(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        path = self.path_for(key)
        ttl_millis = _ttl_millis(ttl)

        # Old metadata goes first so an interrupted write reads back as a miss
        _sidecar(path, TTL_SUFFIX).unlink(missing_ok=True)
        _sidecar(path, ENTRY_TIME_SUFFIX).unlink(missing_ok=True)

        _write_private(path, value)
        _write_private(_sidecar(path, ENTRY_TIME_SUFFIX), str(self._now_millis()).encode())
        _write_private(_sidecar(path, TTL_SUFFIX), str(ttl_millis).encode())
        logger.debug("Cached %s (ttl=%dms)", key, ttl_millis)

    async def remove(self, key: str) -> None:
        path = self.path_for(key)
        path.unlink()
        _sidecar(path, TTL_SUFFIX).unlink(missing_ok=True)
        _sidecar(path, ENTRY_TIME_SUFFIX).unlink(missing_ok=True)

    async def remove_all(self) -> None:
        for path in sorted(self.directory.glob(f"{self._prefix}*")):
            path.unlink()

    def _now_millis(self) -> int:
        return int(self._clock() * 1000)


def _ttl_millis(ttl: timedelta | None) -> int:
    """Milliseconds to store for a ttl. Positive ttls never round down to 0, which means no expiry."""
    if ttl is None or ttl <= timedelta(0):
        return 0
    return max(1, math.ceil(ttl / timedelta(milliseconds=1)))


def _sidecar(path: Path, suffix: str) -> Path:
    return path.with_name(path.name + suffix)


def _read_millis(path: Path) -> int:
    return int(path.read_bytes().decode("ascii").strip())


def _write_private(path: Path, data: bytes) -> None:
    # Credentials end up in here, keep them owner-readable only
    path.touch(mode=0o600, exist_ok=True)
    path.write_bytes(data)
