"""Signing of claim authorizations with the trusted signer key."""

import logging
from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import to_checksum_address

from ..models.claim import Authorization
from ..models.errors import ConfigurationError
from .message_encoder import hash_claim_message

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 300


def _signable(msg_hash: bytes):
    # The hash is signed as the text of its 0x-prefixed hex form
    return encode_defunct(text="0x" + msg_hash.hex())


class Signer:
    """Holds the trusted signer key and issues claim authorizations.

    The key is loaded once and never re-derived per request. Construction
    fails with ConfigurationError when the key is malformed or does not
    match the configured signer address.
    """

    def __init__(
        self,
        private_key: str,
        signer_address: Optional[str] = None,
        expiry: int = DEFAULT_EXPIRY_SECONDS,
    ):
        """Initialize the signer.

        Args:
            private_key: Hex-encoded secp256k1 private key
            signer_address: Expected address of the key, derived when omitted
            expiry: Validity window in seconds embedded in every authorization
        """
        if not private_key:
            raise ConfigurationError("Signer private key is not configured")

        try:
            self._account = Account.from_key(private_key)
        except Exception as e:
            raise ConfigurationError(f"Signer private key is malformed: {type(e).__name__}") from e

        if signer_address:
            try:
                expected = to_checksum_address(signer_address)
            except ValueError as e:
                raise ConfigurationError(f"Signer address is malformed: {signer_address}") from e
            if expected != self._account.address:
                raise ConfigurationError(
                    f"Signer address {expected} does not match the configured private key"
                )

        if isinstance(expiry, bool) or not isinstance(expiry, int) or expiry <= 0:
            raise ConfigurationError(f"Expiry must be a positive integer, got {expiry!r}")

        self._expiry = expiry

    @classmethod
    def from_settings(cls, settings) -> "Signer":
        """Create a signer from service settings.

        Raises:
            ConfigurationError: If the key is absent or invalid
        """
        if not settings.signer_private_key:
            raise ConfigurationError("TRUSTED_SIGNER_PKEY is not set")
        return cls(
            private_key=settings.signer_private_key,
            signer_address=settings.signer_address,
            expiry=settings.expiry_seconds,
        )

    @property
    def address(self) -> str:
        """Checksummed address of the signing key."""
        return self._account.address

    @property
    def expiry(self) -> int:
        """Validity window in seconds."""
        return self._expiry

    def sign_hash(self, msg_hash: bytes) -> bytes:
        """Personal-sign a message hash and return the 65-byte signature."""
        signed = self._account.sign_message(_signable(msg_hash))
        return bytes(signed.signature)

    def authorize(self, claimer_address: str) -> Authorization:
        """Produce a signed authorization for ``claimer_address``."""
        claimer = to_checksum_address(claimer_address)
        msg_hash = hash_claim_message(self.address, claimer, self._expiry)
        signature = self.sign_hash(msg_hash)
        logger.debug(f"✍️ Signed claim for {claimer} (expiry={self._expiry}s)")
        return Authorization(
            claimer_address=claimer,
            expiry=self._expiry,
            signature=signature,
        )

    def recover(self, authorization: Authorization) -> str:
        """Recover the address that signed ``authorization``."""
        msg_hash = hash_claim_message(self.address, authorization.claimer_address, authorization.expiry)
        return Account.recover_message(_signable(msg_hash), signature=authorization.signature)
