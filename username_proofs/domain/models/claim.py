"""Domain models for claims, identity groups and issued authorizations."""

from typing import List, Optional

from eth_abi import encode
from pydantic import BaseModel, Field

from .attestation import VerifiedAccount

AUTHORIZATION_ABI_TYPES = ["address", "uint256", "bytes"]


class Authorization(BaseModel):
    """Signed authorization consumed on-chain to grant the discount."""

    claimer_address: str = Field(..., description="Checksummed claimer address")
    expiry: int = Field(..., gt=0, description="Validity window in seconds")
    signature: bytes = Field(..., description="Signer's signature over the claim hash")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def encoded(self) -> str:
        """ABI-encode ``(address, uint256, bytes)`` as a 0x-prefixed hex string."""
        data = encode(
            AUTHORIZATION_ABI_TYPES,
            [self.claimer_address, self.expiry, self.signature],
        )
        return "0x" + data.hex()


class IdentityGroup(BaseModel):
    """All addresses considered the same claimant, plus their shared key."""

    idempotency_key: str = Field(..., description="Stable key for the linked-address group")
    linked_addresses: List[str] = Field(default_factory=list, description="Linked addresses, claimer included")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @classmethod
    def including(cls, claimer: str, idempotency_key: str, linked: List[str]) -> "IdentityGroup":
        """Build a group that is guaranteed to contain ``claimer`` exactly once."""
        addresses: List[str] = [claimer]
        seen = {claimer.lower()}
        for address in linked:
            if address.lower() not in seen:
                seen.add(address.lower())
                addresses.append(address)
        return cls(idempotency_key=idempotency_key, linked_addresses=addresses)


class ClaimRecord(BaseModel):
    """Previously issued claim, persisted in the key/value store."""

    address: str = Field(..., description="Address the claim was first issued to")
    signed_message: str = Field(..., alias="signedMessage", description="Encoded authorization")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        populate_by_name = True


class ProofResult(BaseModel):
    """Outcome of a proof request."""

    attestations: List[VerifiedAccount] = Field(default_factory=list)
    linked_addresses: Optional[List[str]] = Field(None, alias="linkedAddresses")
    signed_message: Optional[str] = Field(None, alias="signedMessage")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    @property
    def is_eligible(self) -> bool:
        """Whether the address holds at least one verified-account attestation."""
        return bool(self.attestations)
