"""Domain service deciding discount eligibility from attestations."""

import json
import logging
import re
from typing import List, Sequence

from pydantic import ValidationError

from ..models.attestation import RawAttestation, VerifiedAccount
from ..models.errors import ConfigurationError, ProofError, UpstreamError
from ..models.network import Network
from ..ports.attestation_provider import AttestationProvider

logger = logging.getLogger(__name__)

SCHEMA_ID_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def validate_schema_id(schema_id: str, name: str = "schema id") -> str:
    """Check that ``schema_id`` is a 0x-prefixed 32-byte hex identifier.

    Raises:
        ConfigurationError: If the identifier is malformed
    """
    if not isinstance(schema_id, str) or not SCHEMA_ID_PATTERN.match(schema_id):
        raise ConfigurationError(f"invalid {name}: {schema_id!r}")
    return schema_id


def decode_verified_account(attestation: RawAttestation) -> VerifiedAccount:
    """Decode the first field of an attestation's JSON payload.

    Raises:
        UpstreamError: If the payload does not have the expected shape
    """
    try:
        fields = json.loads(attestation.decoded_data_json)
        if not isinstance(fields, list) or not fields:
            raise ValueError("decoded data is not a non-empty array")
        return VerifiedAccount.model_validate(fields[0])
    except (ValueError, ValidationError) as e:
        raise UpstreamError(
            f"Malformed attestation payload for schema {attestation.schema_id}: {e}"
        ) from e


class EligibilityResolver:
    """Domain service resolving verified-account facts for an address.

    An address is eligible when it holds at least one live attestation
    under either the verified-account or the verified-cb1-account schema.
    """

    def __init__(
        self,
        provider: AttestationProvider,
        schema_ids: Sequence[str],
        network: Network,
    ):
        """Initialize service with attestation provider.

        Args:
            provider: Attestation provider port implementation
            schema_ids: Verified-account and verified-cb1-account schema ids
            network: Chain the attestations live on

        Raises:
            ConfigurationError: If any schema id is malformed
        """
        self._provider = provider
        self._schema_ids = [validate_schema_id(s) for s in schema_ids]
        self._network = network

    @property
    def schema_ids(self) -> List[str]:
        return list(self._schema_ids)

    @property
    def network(self) -> Network:
        return self._network

    async def resolve(self, address: str) -> List[VerifiedAccount]:
        """Return the verified-account facts held by ``address``.

        Args:
            address: Address to check

        Returns:
            Decoded facts; empty when the address is not eligible

        Raises:
            UpstreamError: If the lookup fails or a payload is malformed
        """
        logger.info(f"🔎 Looking up attestations for {address} on {self._network.value}")
        try:
            attestations = await self._provider.fetch(
                address,
                self._network,
                schemas=self._schema_ids,
            )
        except ProofError:
            raise
        except Exception as e:
            raise UpstreamError(f"Attestation lookup failed: {e}") from e

        if not attestations:
            logger.info(f"🚫 No verified-account attestations for {address}")
            return []

        facts = [decode_verified_account(attestation) for attestation in attestations]
        logger.info(f"✅ Found {len(facts)} verified-account attestation(s) for {address}")
        return facts
