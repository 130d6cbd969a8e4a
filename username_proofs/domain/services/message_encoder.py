"""Canonical encoding and hashing of the claim message."""

from eth_abi.packed import encode_packed
from eth_utils import keccak, to_checksum_address

# EIP-191 version 0x00 ("data with intended validator") prefix
CLAIM_MESSAGE_PREFIX = b"\x19\x00"
CLAIM_MESSAGE_TYPES = ["bytes2", "address", "address", "uint256"]


def encode_claim_message(signer_address: str, claimer_address: str, expiry: int) -> bytes:
    """Pack ``prefix | signer | claimer | expiry`` into the signed pre-image.

    Args:
        signer_address: Address of the trusted signer
        claimer_address: Address claiming the discount
        expiry: Validity window in seconds

    Returns:
        Packed message bytes

    Raises:
        ValueError: If expiry is not a positive integer
    """
    if isinstance(expiry, bool) or not isinstance(expiry, int) or expiry <= 0:
        raise ValueError(f"Expiry must be a positive integer, got {expiry!r}")

    return encode_packed(
        CLAIM_MESSAGE_TYPES,
        [
            CLAIM_MESSAGE_PREFIX,
            to_checksum_address(signer_address),
            to_checksum_address(claimer_address),
            expiry,
        ],
    )


def hash_claim_message(signer_address: str, claimer_address: str, expiry: int) -> bytes:
    """Keccak-256 hash of the packed claim message."""
    return keccak(encode_claim_message(signer_address, claimer_address, expiry))
