"""Claim cache enforcing at most one claim per identity group."""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from ..models.claim import ClaimRecord
from ..models.errors import ConflictError, ProofError, UpstreamError
from ..ports.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "username:claims:"


class ClaimCache:
    """Per-identity-group record of the issued authorization.

    Each key moves from absent to claimed on commit and back to absent
    when the store expires the entry. Consistency is weak: lookup and
    commit are separate store calls, so two concurrent first-time claims
    for the same group may both commit and the last write wins. Swap in a
    store with set-if-absent semantics for strict once-only issuance.
    """

    def __init__(self, store: KeyValueStore, key_prefix: str = DEFAULT_KEY_PREFIX):
        """Initialize the cache.

        Args:
            store: Key/value store port implementation
            key_prefix: Namespace prepended to every idempotency key
        """
        self._store = store
        self._key_prefix = key_prefix

    def key_for(self, idempotency_key: str) -> str:
        return f"{self._key_prefix}{idempotency_key}"

    async def lookup(self, idempotency_key: str) -> Optional[ClaimRecord]:
        """Return the live claim for ``idempotency_key``, if any.

        Raises:
            UpstreamError: If the store fails or holds an unreadable value
        """
        key = self.key_for(idempotency_key)
        try:
            raw = await self._store.get(key)
        except ProofError:
            raise
        except Exception as e:
            raise UpstreamError(f"Claim store read failed for {key}: {e}") from e

        if raw is None:
            return None

        try:
            return ClaimRecord.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            raise UpstreamError(f"Unreadable claim record under {key}: {e}") from e

    async def commit(self, idempotency_key: str, record: ClaimRecord, ttl_seconds: int) -> None:
        """Store ``record`` for ``ttl_seconds``.

        Raises:
            UpstreamError: If the store write fails
        """
        key = self.key_for(idempotency_key)
        value = json.dumps(record.model_dump(by_alias=True))
        try:
            await self._store.set(key, value, ttl_seconds)
        except ProofError:
            raise
        except Exception as e:
            raise UpstreamError(f"Claim store write failed for {key}: {e}") from e
        logger.info(f"💾 Stored claim for {record.address} (ttl={ttl_seconds}s)")

    @staticmethod
    def check(record: ClaimRecord, address: str) -> ClaimRecord:
        """Return ``record`` if it belongs to ``address``.

        Raises:
            ConflictError: If another address in the group holds the claim
        """
        if record.address.lower() != address.lower():
            raise ConflictError(
                f"Claim already issued to {record.address}, requested by {address}"
            )
        return record
