"""Health check endpoints."""

from typing import Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ... import __version__
from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    network: str
    chain_id: int
    testnet: bool
    signer_configured: bool
    configuration_errors: List[str]
    providers: Dict[str, str]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> HealthResponse:
    """Report configuration status and the active collaborators."""
    settings = container.settings
    errors = container.configuration_errors()
    return HealthResponse(
        status="healthy" if not errors else "degraded",
        version=__version__,
        network=settings.network.value,
        chain_id=settings.network.chain_id,
        testnet=settings.network.is_testnet,
        signer_configured=bool(settings.signer_private_key),
        configuration_errors=errors,
        providers=container.describe(),
    )
