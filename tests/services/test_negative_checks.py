from __future__ import annotations

import pytest

from geocache.services.negative_checks import ADDRESS_CHECK_TTL_SECONDS, NegativeCheckRegistry


@pytest.fixture
def registry(store):
    return NegativeCheckRegistry(store)


def test_identity_normalisation(registry):
    assert registry.normalize("  sw1a   1aa ") == "SW1A_1AA"
    assert registry.key_for("sw1a 1aa") == "address_check_SW1A_1AA"


@pytest.mark.asyncio
async def test_mark_then_check(registry, backend):
    assert await registry.has_been_checked("SW1A 1AA") is False
    assert await registry.mark_checked("SW1A 1AA") is True
    assert await registry.has_been_checked("sw1a 1aa") is True
    assert backend.ttls["address_check_SW1A_1AA"] == ADDRESS_CHECK_TTL_SECONDS


@pytest.mark.asyncio
async def test_marker_expires(registry, clock):
    await registry.mark_checked("E1 6AN", ttl_seconds=60)
    clock.advance(59)
    assert await registry.has_been_checked("E1 6AN") is True
    clock.advance(1)
    assert await registry.has_been_checked("E1 6AN") is False


@pytest.mark.asyncio
async def test_backend_outage_reads_as_unchecked(registry, backend):
    await registry.mark_checked("E1 6AN")
    backend.available = False
    assert await registry.has_been_checked("E1 6AN") is False
    assert await registry.mark_checked("E1 6AN") is False
