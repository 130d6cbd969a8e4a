"""Tests for the identity resolver."""

from unittest.mock import AsyncMock

import pytest

from username_proofs.domain.models.claim import IdentityGroup
from username_proofs.domain.models.errors import UpstreamError
from username_proofs.domain.services.identity_resolver import IdentityResolver
from tests.conftest import ALICE, BOB, CAROL, FakeLinkingProvider


@pytest.mark.asyncio
async def test_group_key_is_shared(linking_provider: FakeLinkingProvider):
    """Both members of a linked group resolve to the same key."""
    resolver = IdentityResolver(linking_provider)

    alice = await resolver.resolve(ALICE)
    bob = await resolver.resolve(BOB)

    assert alice.idempotency_key == bob.idempotency_key
    assert alice.linked_addresses == [ALICE, BOB]
    assert bob.linked_addresses == [BOB, ALICE]


@pytest.mark.asyncio
async def test_standalone_address(linking_provider: FakeLinkingProvider):
    resolver = IdentityResolver(linking_provider)
    group = await resolver.resolve(CAROL)
    assert group.linked_addresses == [CAROL]


@pytest.mark.asyncio
async def test_claimer_added_when_missing():
    provider = AsyncMock()
    provider.resolve.return_value = IdentityGroup(idempotency_key="k", linked_addresses=[BOB, BOB.lower()])

    group = await IdentityResolver(provider).resolve(ALICE)

    assert group.linked_addresses == [ALICE, BOB]
    assert group.idempotency_key == "k"


@pytest.mark.asyncio
async def test_empty_key_is_upstream_error():
    provider = AsyncMock()
    provider.resolve.return_value = IdentityGroup(idempotency_key="", linked_addresses=[ALICE])

    with pytest.raises(UpstreamError):
        await IdentityResolver(provider).resolve(ALICE)


@pytest.mark.asyncio
async def test_provider_failure_is_upstream_error():
    provider = AsyncMock()
    provider.resolve.side_effect = ConnectionError("linking API unreachable")

    with pytest.raises(UpstreamError):
        await IdentityResolver(provider).resolve(ALICE)
