"""Domain models for attestations and the verified-account facts decoded from them."""

from typing import Optional

from pydantic import BaseModel, Field


class VerifiedAccountValue(BaseModel):
    """Typed value carried inside a verified-account attestation field."""

    name: str = Field(..., description="Field name in the attestation schema")
    type: str = Field(..., description="Solidity type of the field")
    value: bool = Field(..., description="Whether the account is verified")

    class Config:
        """Pydantic model configuration."""
        frozen = True


class VerifiedAccount(BaseModel):
    """A decoded attestation record proving a verified account."""

    name: str = Field(..., description="Field name in the attestation schema")
    type: str = Field(..., description="Solidity type of the field")
    signature: str = Field(..., description="Schema field signature, e.g. 'bool verifiedAccount'")
    value: VerifiedAccountValue = Field(..., description="Decoded field value")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        json_schema_extra = {
            "example": {
                "name": "verifiedAccount",
                "type": "bool",
                "signature": "bool verifiedAccount",
                "value": {"name": "verifiedAccount", "type": "bool", "value": True},
            }
        }


class RawAttestation(BaseModel):
    """Attestation record as returned by an attestation provider."""

    id: Optional[str] = Field(None, description="Attestation UID")
    schema_id: str = Field(..., description="Schema identifier the attestation was issued under")
    attester: Optional[str] = Field(None, description="Address that issued the attestation")
    recipient: Optional[str] = Field(None, description="Address the attestation is about")
    revoked: bool = Field(default=False, description="Whether the attestation has been revoked")
    expiration_time: int = Field(default=0, description="Unix expiry, 0 for never")
    decoded_data_json: str = Field(..., description="JSON-encoded array of decoded schema fields")
