"""HTTP implementation of the identity-linking provider interface."""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from ...domain.models.claim import IdentityGroup
from ...domain.models.errors import UpstreamError

logger = logging.getLogger(__name__)


class LinkedAddressesConfig(BaseModel):
    """Configuration for the linked-addresses adapter."""

    base_url: str
    api_key: Optional[str] = None
    timeout: float = 10.0


class LinkedAddressesAdapter:
    """Resolves identity groups through a linked-addresses HTTP API.

    The API answers ``GET /linked-addresses?wallet_address=...`` with
    ``{"linkedAddresses": [...], "idemKey": "..."}``.
    """

    def __init__(
        self,
        config: LinkedAddressesConfig,
        provider_name: str = "LinkedAddresses",
    ):
        """Initialize the adapter."""
        self._config = config
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._config.api_key:
                headers["Authorization"] = f"Bearer {self._config.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers=headers,
            )

    async def resolve(self, address: str) -> IdentityGroup:
        """Resolve an address to its linked-address group and idempotency key."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        try:
            response = await self._client.get(
                "/linked-addresses",
                params={"wallet_address": address},
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"Linked addresses request failed: {e}") from e

        try:
            return IdentityGroup(
                idempotency_key=body["idemKey"],
                linked_addresses=body.get("linkedAddresses") or [],
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise UpstreamError(f"Unexpected linked addresses response: {e}") from e

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def provider_name(self) -> str:
        return self._name


class StandaloneLinkingAdapter:
    """Treats every address as a group of its own."""

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def resolve(self, address: str) -> IdentityGroup:
        return IdentityGroup(idempotency_key=address.lower(), linked_addresses=[address])

    @property
    def provider_name(self) -> str:
        return "Standalone"
