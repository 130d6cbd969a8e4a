"""Domain service mapping a claimer to its linked-address group."""

import logging

from ..models.claim import IdentityGroup
from ..models.errors import ProofError, UpstreamError
from ..ports.identity_provider import IdentityLinkingProvider

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves the identity group a claimer belongs to."""

    def __init__(self, provider: IdentityLinkingProvider):
        self._provider = provider

    async def resolve(self, address: str) -> IdentityGroup:
        """Resolve ``address`` to its identity group.

        The returned group always lists ``address`` and carries a key
        that is shared by every member of the group.

        Raises:
            UpstreamError: If the provider fails or returns no key
        """
        try:
            group = await self._provider.resolve(address)
        except ProofError:
            raise
        except Exception as e:
            raise UpstreamError(f"Linked address lookup failed: {e}") from e

        if not group.idempotency_key:
            raise UpstreamError(f"Linking provider returned no idempotency key for {address}")

        group = IdentityGroup.including(address, group.idempotency_key, group.linked_addresses)
        logger.info(f"🔗 {address} resolved to a group of {len(group.linked_addresses)} address(es)")
        return group
