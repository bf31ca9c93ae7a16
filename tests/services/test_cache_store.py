from __future__ import annotations

import pytest

from geocache.schemas.postal import PcZone
from geocache.schemas.timezone import TzSnapshot
from tests.factories import make_tz, make_zone


@pytest.mark.asyncio
async def test_round_trip_uses_wire_aliases(store, backend):
    zones = [make_zone(), make_zone("WC2N 5DN", 240.0)]
    assert await store.set("pc_key", zones) is True

    raw = backend.data["pc_key"][0]
    assert b'"gr"' in raw and b'"pc":"WC2N 5DU"' in raw
    assert await store.get("pc_key", list[PcZone]) == zones


@pytest.mark.asyncio
async def test_entry_expires_after_ttl(store, backend, clock):
    await store.set("tz_key", make_tz(), ttl_seconds=900)
    assert backend.ttls["tz_key"] == 900

    clock.advance(899)
    assert await store.get("tz_key", TzSnapshot) is not None
    clock.advance(1)
    assert await store.get("tz_key", TzSnapshot) is None


@pytest.mark.asyncio
async def test_zero_ttl_means_no_expiry(store, backend, clock):
    await store.set("place_key", make_tz(), ttl_seconds=0)
    assert backend.ttls["place_key"] is None
    clock.advance(10 * 365 * 86400)
    assert await store.get("place_key", TzSnapshot) is not None


@pytest.mark.asyncio
async def test_miss_returns_none(store):
    assert await store.get("nothing_here", TzSnapshot) is None


@pytest.mark.asyncio
async def test_backend_outage_is_fail_open(store, backend):
    await store.set("k", make_tz())
    backend.available = False

    assert await store.get("k", TzSnapshot) is None
    assert await store.set("k", make_tz()) is False
    assert await store.ping() is False


@pytest.mark.asyncio
async def test_undecodable_entry_reads_as_miss(store, backend):
    backend.data["broken"] = (b"{not json", None)
    backend.data["wrong_shape"] = (b'{"pc": 5}', None)
    backend.data["wrong_type"] = (b'"just a string"', None)

    assert await store.get("broken", TzSnapshot) is None
    assert await store.get("wrong_shape", list[PcZone]) is None
    assert await store.get("wrong_type", TzSnapshot) is None


@pytest.mark.asyncio
async def test_ping(store):
    assert await store.ping() is True
