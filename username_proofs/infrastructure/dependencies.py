"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Dict, List, Optional

from dotenv import load_dotenv

from ..domain.models.errors import ConfigurationError
from ..domain.ports.attestation_provider import AttestationProvider
from ..domain.ports.identity_provider import IdentityLinkingProvider
from ..domain.ports.key_value_store import KeyValueStore
from ..domain.services.claim_cache import ClaimCache
from ..domain.services.claim_service import ClaimService
from ..domain.services.eligibility_resolver import EligibilityResolver
from ..domain.services.identity_resolver import IdentityResolver
from ..domain.services.signer import Signer
from .attestations.eas_adapter import EASAttestationAdapter, EASConfig
from .identity.linked_addresses_adapter import (
    LinkedAddressesAdapter,
    LinkedAddressesConfig,
    StandaloneLinkingAdapter,
)
from .settings import ProofSettings
from .storage.memory_store import MemoryKeyValueStore
from .storage.vercel_kv_store import VercelKVConfig, VercelKVStore

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


def build_store(settings: ProofSettings) -> KeyValueStore:
    """Pick the claim store for the configured environment."""
    if settings.kv_rest_api_url and settings.kv_rest_api_token:
        return VercelKVStore(
            VercelKVConfig(
                rest_api_url=settings.kv_rest_api_url,
                rest_api_token=settings.kv_rest_api_token,
                timeout=settings.http_timeout,
            )
        )
    return MemoryKeyValueStore()


def build_linking_provider(settings: ProofSettings) -> IdentityLinkingProvider:
    """Pick the identity-linking provider for the configured environment."""
    if settings.linked_addresses_api_url:
        return LinkedAddressesAdapter(
            LinkedAddressesConfig(
                base_url=settings.linked_addresses_api_url,
                api_key=settings.linked_addresses_api_key,
                timeout=settings.http_timeout,
            )
        )
    return StandaloneLinkingAdapter()


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(
        self,
        settings: Optional[ProofSettings] = None,
        attestation_provider: Optional[AttestationProvider] = None,
        linking_provider: Optional[IdentityLinkingProvider] = None,
        store: Optional[KeyValueStore] = None,
    ):
        """Initialize service container.

        Collaborators default to the adapters selected by ``settings``.
        """
        self._settings = settings or ProofSettings.from_env()
        if attestation_provider is None:
            attestation_provider = EASAttestationAdapter(
                EASConfig(
                    graphql_url=self._settings.attestation_url,
                    timeout=self._settings.http_timeout,
                )
            )
        self._attestation_provider = attestation_provider
        if linking_provider is None:
            linking_provider = build_linking_provider(self._settings)
        self._linking_provider = linking_provider
        self._store = store if store is not None else build_store(self._settings)
        self._claim_service: Optional[ClaimService] = None
        self._initialized = False
        logger.info(
            f"🔧 Service container ready (attestations={self._attestation_provider.provider_name}, "
            f"linking={self._linking_provider.provider_name}, store={self._store.store_name})"
        )

    @property
    def settings(self) -> ProofSettings:
        return self._settings

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def describe(self) -> Dict[str, str]:
        """Names of the active collaborators."""
        return {
            "attestations": self._attestation_provider.provider_name,
            "linking": self._linking_provider.provider_name,
            "store": self._store.store_name,
        }

    def configuration_errors(self) -> List[str]:
        return self._settings.validate_all()

    async def initialize(self) -> None:
        """Initialize the outbound adapters."""
        if self._initialized:
            return
        await self._attestation_provider.initialize()
        await self._linking_provider.initialize()
        self._initialized = True

    async def shutdown(self) -> None:
        """Release adapter resources."""
        await self._attestation_provider.shutdown()
        await self._linking_provider.shutdown()
        await self._store.close()
        self._claim_service = None
        self._initialized = False

    def _build_claim_service(self) -> ClaimService:
        signer = Signer.from_settings(self._settings)
        eligibility = EligibilityResolver(
            self._attestation_provider,
            self._settings.schema_ids,
            self._settings.network,
        )
        return ClaimService(
            signer=signer,
            eligibility=eligibility,
            identity=IdentityResolver(self._linking_provider),
            cache=ClaimCache(self._store, key_prefix=self._settings.claims_key_prefix),
        )

    async def get_claim_service(self) -> ClaimService:
        """Get the claim service, building it on first use.

        Raises:
            ConfigurationError: If the signer key or schema ids are invalid
        """
        if self._claim_service is None:
            try:
                service = self._build_claim_service()
            except ConfigurationError as e:
                logger.error(f"🛑 Claim service misconfigured: {e}")
                raise
            await self.initialize()
            self._claim_service = service
        return self._claim_service


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    return ServiceContainer()
