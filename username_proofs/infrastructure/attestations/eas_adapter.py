"""EAS GraphQL implementation of the attestation provider interface."""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import httpx
from eth_utils import to_checksum_address
from pydantic import BaseModel, ValidationError

from ...domain.models.attestation import RawAttestation
from ...domain.models.errors import UpstreamError
from ...domain.models.network import Network
from ...domain.ports.attestation_provider import AttestationProvider

logger = logging.getLogger(__name__)

ATTESTATIONS_QUERY = """
query AttestationsForUsers(
  $where: AttestationWhereInput
  $distinct: [AttestationScalarFieldEnum!]
  $take: Int
) {
  attestations(where: $where, distinct: $distinct, take: $take) {
    id
    txid
    schemaId
    attester
    recipient
    revoked
    revocationTime
    expirationTime
    time
    timeCreated
    decodedDataJson
  }
}
"""


class EASConfig(BaseModel):
    """Configuration for the EAS adapter."""

    graphql_url: str
    timeout: float = 10.0
    limit: int = 10


class EASAttestationAdapter(AttestationProvider):
    """Queries an EAS GraphQL indexer for live attestations."""

    def __init__(
        self,
        config: EASConfig,
        provider_name: str = "EAS",
    ):
        """Initialize the adapter."""
        self._config = config
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers={"Content-Type": "application/json"},
            )
        self._initialized = True

    def build_variables(self, address: str, schemas: Sequence[str], now: Optional[int] = None) -> Dict[str, Any]:
        """Build the GraphQL filter for unrevoked, unexpired attestations."""
        now = int(time.time()) if now is None else now
        return {
            "where": {
                "AND": [
                    {"recipient": {"equals": to_checksum_address(address)}},
                    {"revoked": {"equals": False}},
                    {"OR": [
                        {"expirationTime": {"equals": 0}},
                        {"expirationTime": {"gt": now}},
                    ]},
                    {"schemaId": {"in": list(schemas)}},
                ]
            },
            "distinct": ["schemaId"],
            "take": self._config.limit,
        }

    async def fetch(
        self,
        address: str,
        network: Network,
        schemas: Sequence[str],
    ) -> List[RawAttestation]:
        """Fetch live attestations for ``address`` under any of ``schemas``."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        payload = {
            "query": ATTESTATIONS_QUERY,
            "variables": self.build_variables(address, schemas),
        }

        try:
            response = await self._client.post(self._config.graphql_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"EAS query failed on {network.value}: {e}") from e

        if body.get("errors"):
            raise UpstreamError(f"EAS query returned errors: {body['errors']}")

        records = (body.get("data") or {}).get("attestations") or []
        try:
            return [
                RawAttestation(
                    id=record.get("id"),
                    schema_id=record["schemaId"],
                    attester=record.get("attester"),
                    recipient=record.get("recipient"),
                    revoked=record.get("revoked", False),
                    expiration_time=record.get("expirationTime") or 0,
                    decoded_data_json=record["decodedDataJson"],
                )
                for record in records
            ]
        except (KeyError, TypeError, ValidationError) as e:
            raise UpstreamError(f"Unexpected EAS attestation shape: {e}") from e

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available."""
        return self._initialized
