"""Test configuration and common fixtures."""

import json
from typing import Dict, List, Optional, Sequence

import pytest

from username_proofs.domain.models.attestation import RawAttestation
from username_proofs.domain.models.claim import IdentityGroup
from username_proofs.domain.models.network import Network
from username_proofs.domain.ports.attestation_provider import AttestationProvider
from username_proofs.domain.services.claim_cache import ClaimCache
from username_proofs.domain.services.claim_service import ClaimService
from username_proofs.domain.services.eligibility_resolver import EligibilityResolver
from username_proofs.domain.services.identity_resolver import IdentityResolver
from username_proofs.domain.services.signer import Signer
from username_proofs.infrastructure.settings import ProofSettings
from username_proofs.infrastructure.storage.memory_store import MemoryKeyValueStore

# Well-known development keys, never used outside tests
SIGNER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ALICE = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
BOB = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"
CAROL = "0x90F79bf6EB2c4f870365E785982E1f101E93b906"

VERIFIED_ACCOUNT_SCHEMA = "0x" + "f8" * 32
VERIFIED_CB1_ACCOUNT_SCHEMA = "0x" + "18" * 32


def verified_account_json(name: str = "verifiedAccount", value: bool = True) -> str:
    """Decoded attestation payload in the shape the EAS indexer returns."""
    return json.dumps([
        {
            "name": name,
            "type": "bool",
            "signature": f"bool {name}",
            "value": {"name": name, "type": "bool", "value": value},
        }
    ])


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAttestationProvider(AttestationProvider):
    """Attestation provider serving canned attestations per address."""

    def __init__(self, attestations: Optional[Dict[str, List[RawAttestation]]] = None):
        self.attestations = {k.lower(): v for k, v in (attestations or {}).items()}
        self.calls: List[tuple] = []
        self._initialized = False

    async def initialize(self) -> None:
        self._initialized = True

    async def fetch(self, address: str, network: Network, schemas: Sequence[str]) -> List[RawAttestation]:
        self.calls.append((address, network, list(schemas)))
        return list(self.attestations.get(address.lower(), []))

    async def shutdown(self) -> None:
        self._initialized = False

    @property
    def provider_name(self) -> str:
        return "Fake"

    @property
    def is_available(self) -> bool:
        return self._initialized


class FakeLinkingProvider:
    """Linking provider mapping addresses to fixed groups."""

    def __init__(self, groups: Optional[List[List[str]]] = None):
        self._groups = groups or []
        self.calls: List[str] = []

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def resolve(self, address: str) -> IdentityGroup:
        self.calls.append(address)
        for index, group in enumerate(self._groups):
            if address.lower() in {a.lower() for a in group}:
                return IdentityGroup(idempotency_key=f"group-{index}", linked_addresses=group)
        return IdentityGroup(idempotency_key=address.lower(), linked_addresses=[address])

    @property
    def provider_name(self) -> str:
        return "FakeLinking"


def attestation_for(address: str, schema_id: str = VERIFIED_ACCOUNT_SCHEMA, **kwargs) -> RawAttestation:
    return RawAttestation(
        id="0x" + "ab" * 32,
        schema_id=schema_id,
        recipient=address,
        decoded_data_json=kwargs.pop("decoded_data_json", verified_account_json()),
        **kwargs,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryKeyValueStore:
    return MemoryKeyValueStore(timer=clock)


@pytest.fixture
def signer() -> Signer:
    return Signer(SIGNER_KEY, signer_address=SIGNER_ADDRESS, expiry=300)


@pytest.fixture
def attestation_provider() -> FakeAttestationProvider:
    """Alice, Bob and Carol are verified; everyone else is not."""
    return FakeAttestationProvider({
        ALICE: [attestation_for(ALICE)],
        BOB: [attestation_for(BOB, VERIFIED_CB1_ACCOUNT_SCHEMA, decoded_data_json=verified_account_json("verifiedCb1Account"))],
        CAROL: [attestation_for(CAROL)],
    })


@pytest.fixture
def linking_provider() -> FakeLinkingProvider:
    """Alice and Bob are linked; Carol stands alone."""
    return FakeLinkingProvider([[ALICE, BOB]])


@pytest.fixture
def settings() -> ProofSettings:
    return ProofSettings(
        signer_private_key=SIGNER_KEY,
        signer_address=SIGNER_ADDRESS,
        expiry_seconds=300,
        verified_account_schema_id=VERIFIED_ACCOUNT_SCHEMA,
        verified_cb1_account_schema_id=VERIFIED_CB1_ACCOUNT_SCHEMA,
        network=Network.BASE_SEPOLIA,
    )


@pytest.fixture
def claim_service(
    signer: Signer,
    attestation_provider: FakeAttestationProvider,
    linking_provider: FakeLinkingProvider,
    store: MemoryKeyValueStore,
) -> ClaimService:
    return ClaimService(
        signer=signer,
        eligibility=EligibilityResolver(
            attestation_provider,
            [VERIFIED_ACCOUNT_SCHEMA, VERIFIED_CB1_ACCOUNT_SCHEMA],
            Network.BASE_SEPOLIA,
        ),
        identity=IdentityResolver(linking_provider),
        cache=ClaimCache(store),
    )
