"""Port interface for attestation lookup providers."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models.attestation import RawAttestation
from ..models.network import Network


class AttestationProvider(ABC):
    """Abstract interface for attestation lookups.

    Concrete implementations query an attestation indexer (EAS, etc.)
    for attestations issued to an address under a set of schemas.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the provider and its resources."""
        pass

    @abstractmethod
    async def fetch(
        self,
        address: str,
        network: Network,
        schemas: Sequence[str],
    ) -> List[RawAttestation]:
        """Fetch live attestations for ``address`` under any of ``schemas``.

        Args:
            address: Recipient address
            network: Chain to query
            schemas: Schema identifiers to match

        Returns:
            Matching attestations, empty when there are none
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Clean up resources."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        pass
