"""Discount proof API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ...domain.models.attestation import VerifiedAccount
from ...domain.models.errors import InputError, ProofError
from ...domain.services.claim_service import validate_address
from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(prefix="/api/proofs", tags=["proofs"])


class CoinbaseProofResponse(BaseModel):
    """Response model for the verified-account discount proof."""

    linked_addresses: Optional[List[str]] = Field(
        None,
        alias="linkedAddresses",
        description="Addresses linked to the claimer, claimer included",
    )
    signed_message: Optional[str] = Field(
        None,
        alias="signedMessage",
        description="ABI-encoded (address, uint256, bytes) to pass to the registrar",
    )
    attestations: List[VerifiedAccount] = Field(
        default_factory=list,
        description="Verified-account attestations held by the claimer",
    )

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True


def _to_http_error(error: ProofError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.public_message)


@router.get(
    "/coinbase",
    response_model=CoinbaseProofResponse,
    response_model_exclude_none=True,
)
async def coinbase_proof(
    request: Request,
    container: ServiceContainer = Depends(get_service_container),
) -> CoinbaseProofResponse:
    """Report whether an address holds a verified-account attestation.

    Eligible addresses also receive the signed message that lets them
    register a username at a discount, once per linked-address group.

    Error responses:
        400: address is missing or invalid
        405: method other than GET
        409: a linked address already claimed the discount
        500: misconfiguration or upstream failure
    """
    values = request.query_params.getlist("address")
    try:
        if len(values) != 1:
            raise InputError(f"Expected exactly one address, got {len(values)}")
        address = validate_address(values[0])

        service = await container.get_claim_service()
        result = await service.issue_proof(address)
    except ProofError as e:
        raise _to_http_error(e)

    return CoinbaseProofResponse(
        linked_addresses=result.linked_addresses,
        signed_message=result.signed_message,
        attestations=result.attestations,
    )
