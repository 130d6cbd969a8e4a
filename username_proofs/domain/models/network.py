"""Chain selection for attestation lookups and signing."""

from enum import Enum


class Network(str, Enum):
    """Supported chains."""

    BASE = "base"  # Production
    BASE_SEPOLIA = "base-sepolia"  # Test network

    @property
    def chain_id(self) -> int:
        return _CHAIN_IDS[self]

    @property
    def is_testnet(self) -> bool:
        return self is Network.BASE_SEPOLIA


_CHAIN_IDS = {
    Network.BASE: 8453,
    Network.BASE_SEPOLIA: 84532,
}
