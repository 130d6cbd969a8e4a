"""Port interface for the key/value store backing the claim cache."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """Abstract interface for an expiring key/value store.

    Values are opaque strings; callers own serialization. Implementations
    must expire entries on their own once ``ttl_seconds`` have elapsed.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the live value stored under ``key``, or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``, replacing any previous value."""
        pass

    async def close(self) -> None:
        """Release resources held by the store."""
        return None

    @property
    @abstractmethod
    def store_name(self) -> str:
        """Get the store name."""
        pass
