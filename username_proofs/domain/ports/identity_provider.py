"""Protocol for identity-linking providers."""

from typing import Protocol

from ..models.claim import IdentityGroup


class IdentityLinkingProvider(Protocol):
    """Protocol defining the interface for identity-linking providers."""

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def resolve(self, address: str) -> IdentityGroup:
        """Resolve an address to its linked-address group and idempotency key."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...
