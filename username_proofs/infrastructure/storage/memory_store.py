"""In-process implementation of the key/value store interface."""

import math
import time
from typing import Callable, Optional, Tuple

from cachetools import TLRUCache

from ...domain.ports.key_value_store import KeyValueStore


def _expires_at(_key: str, entry: Tuple[str, int], now: float) -> float:
    return now + entry[1]


class MemoryKeyValueStore(KeyValueStore):
    """Expiring store held in process memory.

    Entries are only visible to the current process, so this store is
    meant for development and tests. Each entry carries its own TTL and
    is only ever removed by expiry, never by size pressure.
    """

    def __init__(self, timer: Callable[[], float] = time.monotonic):
        """Initialize the store.

        Args:
            timer: Clock used for expiry, in seconds
        """
        self._cache = TLRUCache(maxsize=math.inf, ttu=_expires_at, timer=timer)

    async def get(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        return entry[0] if entry is not None else None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._cache[key] = (value, ttl_seconds)

    async def close(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        self._cache.expire()
        return len(self._cache)

    @property
    def store_name(self) -> str:
        return "Memory"
