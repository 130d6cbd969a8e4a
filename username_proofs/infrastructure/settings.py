"""Service configuration loaded from the environment."""

import logging
import os
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.models.errors import ConfigurationError
from ..domain.models.network import Network
from ..domain.services.eligibility_resolver import validate_schema_id
from ..domain.services.signer import DEFAULT_EXPIRY_SECONDS, Signer

logger = logging.getLogger(__name__)

EAS_GRAPHQL_URLS: Dict[Network, str] = {
    Network.BASE: "https://base.easscan.org/graphql",
    Network.BASE_SEPOLIA: "https://base-sepolia.easscan.org/graphql",
}


def _network_from_env() -> Network:
    explicit = os.getenv("PROOFS_NETWORK")
    if explicit:
        try:
            return Network(explicit.lower())
        except ValueError:
            logger.warning(f"⚠️ Unknown PROOFS_NETWORK '{explicit}', falling back to environment")
    if os.getenv("ENVIRONMENT", "").lower() == "development":
        return Network.BASE_SEPOLIA
    return Network.BASE


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ {name}={raw!r} is not an integer, using {default}")
        return default


class ProofSettings(BaseModel):
    """Configuration for the claim-signature service."""

    signer_private_key: Optional[str] = Field(None, repr=False)
    signer_address: Optional[str] = None
    expiry_seconds: int = DEFAULT_EXPIRY_SECONDS
    verified_account_schema_id: str = ""
    verified_cb1_account_schema_id: str = ""
    network: Network = Network.BASE
    eas_graphql_url: Optional[str] = None
    linked_addresses_api_url: Optional[str] = None
    linked_addresses_api_key: Optional[str] = Field(None, repr=False)
    kv_rest_api_url: Optional[str] = None
    kv_rest_api_token: Optional[str] = Field(None, repr=False)
    claims_key_prefix: str = "username:claims:"
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "ProofSettings":
        """Create configuration from environment variables."""
        network = _network_from_env()
        settings = cls(
            signer_private_key=os.getenv("TRUSTED_SIGNER_PKEY") or None,
            signer_address=os.getenv("TRUSTED_SIGNER_ADDRESS") or None,
            expiry_seconds=_int_from_env("USERNAMES_SIGNATURE_EXPIRATION_SECONDS", DEFAULT_EXPIRY_SECONDS),
            verified_account_schema_id=os.getenv("VERIFIED_ACCOUNT_SCHEMA_ID", ""),
            verified_cb1_account_schema_id=os.getenv("VERIFIED_CB1_ACCOUNT_SCHEMA_ID", ""),
            network=network,
            eas_graphql_url=os.getenv("EAS_GRAPHQL_URL") or None,
            linked_addresses_api_url=os.getenv("LINKED_ADDRESSES_API_URL") or None,
            linked_addresses_api_key=os.getenv("LINKED_ADDRESSES_API_KEY") or None,
            kv_rest_api_url=os.getenv("KV_REST_API_URL") or None,
            kv_rest_api_token=os.getenv("KV_REST_API_TOKEN") or None,
            claims_key_prefix=os.getenv("CLAIMS_KEY_PREFIX", "username:claims:"),
            http_timeout=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10.0")),
        )

        # Log configuration status
        logger.info(f"🌐 Network: {settings.network.value} (chain {settings.network.chain_id})")
        if settings.signer_private_key:
            logger.info(f"🔑 Signer key loaded: {len(settings.signer_private_key)} chars")
        else:
            logger.warning("⚠️ TRUSTED_SIGNER_PKEY not found in environment variables")
        if not settings.kv_rest_api_url:
            logger.warning("⚠️ KV_REST_API_URL not set - claims are kept in process memory")
        if not settings.linked_addresses_api_url:
            logger.warning("⚠️ LINKED_ADDRESSES_API_URL not set - each address is its own identity group")

        return settings

    @property
    def schema_ids(self) -> List[str]:
        return [self.verified_account_schema_id, self.verified_cb1_account_schema_id]

    @property
    def attestation_url(self) -> str:
        return self.eas_graphql_url or EAS_GRAPHQL_URLS[self.network]

    def validate_all(self) -> List[str]:
        """Return every configuration problem without raising."""
        problems = []
        try:
            Signer.from_settings(self)
        except ConfigurationError as e:
            problems.append(str(e))
        for name, schema_id in (
            ("verifiedAccountSchemaId", self.verified_account_schema_id),
            ("verifiedCb1AccountSchemaId", self.verified_cb1_account_schema_id),
        ):
            try:
                validate_schema_id(schema_id, name)
            except ConfigurationError as e:
                problems.append(str(e))
        return problems
