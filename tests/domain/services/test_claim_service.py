"""Tests for the claim service."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from username_proofs.domain.models.errors import ConflictError, InputError, UpstreamError
from username_proofs.domain.services.claim_service import ClaimService, validate_address
from username_proofs.infrastructure.storage.memory_store import MemoryKeyValueStore
from tests.conftest import (
    ALICE,
    BOB,
    CAROL,
    FakeAttestationProvider,
    FakeClock,
    FakeLinkingProvider,
)


@pytest.mark.asyncio
async def test_new_claim(claim_service: ClaimService, store: MemoryKeyValueStore):
    """Test that an eligible address receives and stores a new claim."""
    result = await claim_service.issue_proof(ALICE)

    assert result.is_eligible
    assert result.linked_addresses == [ALICE, BOB]
    assert result.signed_message.startswith("0x")

    stored = json.loads(await store.get("username:claims:group-0"))
    assert stored == {"address": ALICE, "signedMessage": result.signed_message}


@pytest.mark.asyncio
async def test_repeat_claim_is_not_resigned(claim_service: ClaimService):
    """Test that a second request replays the stored claim."""
    first = await claim_service.issue_proof(ALICE)

    with patch.object(claim_service.signer, "authorize", wraps=claim_service.signer.authorize) as authorize:
        second = await claim_service.issue_proof(ALICE)

    authorize.assert_not_called()
    assert second.signed_message == first.signed_message
    assert second.linked_addresses == first.linked_addresses


@pytest.mark.asyncio
async def test_linked_address_conflicts(claim_service: ClaimService, store: MemoryKeyValueStore):
    """Test that a linked address cannot claim after its group has."""
    first = await claim_service.issue_proof(ALICE)

    with pytest.raises(ConflictError):
        await claim_service.issue_proof(BOB)

    stored = json.loads(await store.get("username:claims:group-0"))
    assert stored["address"] == ALICE
    assert stored["signedMessage"] == first.signed_message


@pytest.mark.asyncio
async def test_unlinked_addresses_claim_independently(claim_service: ClaimService):
    alice = await claim_service.issue_proof(ALICE)
    carol = await claim_service.issue_proof(CAROL)

    assert carol.linked_addresses == [CAROL]
    assert carol.signed_message != alice.signed_message


@pytest.mark.asyncio
async def test_ineligible_address_skips_identity_and_cache(
    claim_service: ClaimService,
    linking_provider: FakeLinkingProvider,
    store: MemoryKeyValueStore,
):
    result = await claim_service.issue_proof("0x" + "11" * 20)

    assert result.attestations == []
    assert result.signed_message is None
    assert result.linked_addresses is None
    assert linking_provider.calls == []
    assert len(store) == 0


@pytest.mark.asyncio
async def test_claim_reissued_after_expiry(
    claim_service: ClaimService,
    clock: FakeClock,
    store: MemoryKeyValueStore,
):
    """Test that once the claim expires another group member may claim."""
    await claim_service.issue_proof(ALICE)

    clock.advance(301)
    result = await claim_service.issue_proof(BOB)

    stored = json.loads(await store.get("username:claims:group-0"))
    assert stored["address"] == BOB
    assert stored["signedMessage"] == result.signed_message


@pytest.mark.asyncio
async def test_signing_failure_leaves_no_record(claim_service: ClaimService, store: MemoryKeyValueStore):
    with patch.object(claim_service.signer, "authorize", side_effect=RuntimeError("hsm unavailable")):
        with pytest.raises(UpstreamError):
            await claim_service.issue_proof(ALICE)

    assert len(store) == 0


@pytest.mark.asyncio
async def test_store_failure_is_upstream_error(claim_service: ClaimService, store: MemoryKeyValueStore):
    with patch.object(store, "get", AsyncMock(side_effect=ConnectionError("kv down"))):
        with pytest.raises(UpstreamError):
            await claim_service.issue_proof(ALICE)


@pytest.mark.asyncio
async def test_invalid_address_rejected_before_lookup(
    claim_service: ClaimService,
    attestation_provider: FakeAttestationProvider,
):
    with pytest.raises(InputError):
        await claim_service.issue_proof("not-an-address")
    assert attestation_provider.calls == []


@pytest.mark.parametrize(
    "address",
    [
        None,
        "",
        "not-an-address",
        "0x1234",
        ALICE.replace("C5", "c5"),
        ALICE[2:],
        ALICE[2:].lower(),
        "0X" + ALICE[2:],
        " " + ALICE,
    ],
)
def test_validate_address_rejects(address):
    with pytest.raises(InputError):
        validate_address(address)


@pytest.mark.parametrize("address", [ALICE, ALICE.lower(), "0x" + ALICE[2:].upper()])
def test_validate_address_returns_checksum_form(address):
    assert validate_address(address) == ALICE


@pytest.mark.asyncio
async def test_address_spellings_share_one_record(
    claim_service: ClaimService,
    store: MemoryKeyValueStore,
):
    """Test that letter-case variants of one address replay a single claim."""
    first = await claim_service.issue_proof(ALICE.lower())
    second = await claim_service.issue_proof("0x" + ALICE[2:].upper())

    assert second.signed_message == first.signed_message
    assert first.linked_addresses[0] == ALICE
    assert len(store) == 1
