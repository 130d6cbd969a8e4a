"""Service coordinating eligibility, identity, signing and the claim cache."""

import logging
import re
from typing import Optional

from eth_utils import is_address, to_checksum_address

from ..models.claim import ClaimRecord, ProofResult
from ..models.errors import ConflictError, InputError, ProofError, UpstreamError
from .claim_cache import ClaimCache
from .eligibility_resolver import EligibilityResolver
from .identity_resolver import IdentityResolver
from .signer import Signer

logger = logging.getLogger(__name__)


ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_address(address: Optional[str]) -> str:
    """Check that ``address`` is a ``0x``-prefixed 20-byte hex address.

    Mixed-case input must carry a valid EIP-55 checksum.

    Returns:
        The address in checksum form

    Raises:
        InputError: If the address is missing or malformed
    """
    if (
        not isinstance(address, str)
        or not ADDRESS_PATTERN.match(address)
        or not is_address(address)
    ):
        raise InputError(f"Invalid address: {address!r}")
    return to_checksum_address(address)


class ClaimService:
    """Issues discount claim signatures, at most one per identity group."""

    def __init__(
        self,
        signer: Signer,
        eligibility: EligibilityResolver,
        identity: IdentityResolver,
        cache: ClaimCache,
    ):
        """Initialize the service.

        Args:
            signer: Signer holding the trusted key
            eligibility: Attestation-based eligibility resolver
            identity: Linked-address resolver
            cache: Claim cache over the shared key/value store
        """
        self._signer = signer
        self._eligibility = eligibility
        self._identity = identity
        self._cache = cache
        logger.info(f"🔧 ClaimService initialized (signer={signer.address}, expiry={signer.expiry}s)")

    @property
    def signer(self) -> Signer:
        return self._signer

    async def issue_proof(self, address: str) -> ProofResult:
        """Run the claim flow for ``address``.

        Args:
            address: Claimer address

        Returns:
            Attestations, plus linked addresses and the signed message when
            the address is eligible

        Raises:
            InputError: If the address is malformed
            ConflictError: If a linked address already holds the claim
            UpstreamError: If a collaborator fails
        """
        address = validate_address(address)

        try:
            facts = await self._eligibility.resolve(address)
            if not facts:
                return ProofResult(attestations=[])

            group = await self._identity.resolve(address)
            previous = await self._cache.lookup(group.idempotency_key)
            if previous is not None:
                record = self._cache.check(previous, address)
                logger.info(f"♻️ Returning previously issued claim for {address}")
                return ProofResult(
                    attestations=facts,
                    linked_addresses=group.linked_addresses,
                    signed_message=record.signed_message,
                )

            authorization = self._signer.authorize(address)
            record = ClaimRecord(address=address, signed_message=authorization.encoded)
            await self._cache.commit(group.idempotency_key, record, ttl_seconds=self._signer.expiry)

            logger.info(f"✅ Issued new claim for {address}")
            return ProofResult(
                attestations=facts,
                linked_addresses=group.linked_addresses,
                signed_message=record.signed_message,
            )

        except ConflictError as e:
            logger.info(f"⛔ {e}")
            raise
        except ProofError as e:
            logger.error(f"❌ Proof issuance failed for {address}: {e}")
            raise
        except Exception as e:
            logger.error(f"💥 Unexpected error issuing proof for {address}: {e}", exc_info=True)
            raise UpstreamError(f"Unexpected error: {e}") from e
