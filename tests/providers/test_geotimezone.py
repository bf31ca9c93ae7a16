from __future__ import annotations

import httpx
import pytest

from geocache.core.exceptions import MalformedPayloadError
from geocache.providers.geotimezone import GeoTimeZoneProvider, is_valid_zone_name
from geocache.schemas.geo import Coordinate

LONDON = Coordinate.of(51.5, -0.12)

TIMEZONE_PAYLOAD = {
    "abbreviation": "GMT",
    "countryCode": "GB",
    "dst": False,
    "gmtOffset": 0,
    "localDt": "2024-03-30T12:00:00",
    "utc": "2024-03-30T12:00:00",
    "refUnix": 1_711_800_000,
    "weekDay": {"iso": 6, "sun": 7},
    "zoneName": "Europe/London",
    "period": {"start": 1_711_846_800, "end": 1_729_990_800, "nextGmtOffset": 3600},
}


def _provider(handler) -> GeoTimeZoneProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeoTimeZoneProvider(client, base_url="http://gtz.test")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Europe/London", True),
        ("America/Argentina/Buenos_Aires", True),
        ("Etc/GMT+5", True),
        ("UTC", True),
        ("london", False),
        ("51.5,-0.12", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_zone_name(value, expected):
    assert is_valid_zone_name(value) is expected


@pytest.mark.asyncio
async def test_fetch_nearby_place():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "place": {
                    "lat": "51.50853",
                    "lng": "-0.12574",
                    "name": "London",
                    "population": "8961989",
                    "adminName": "England",
                    "cc": "GB",
                    "countryName": "United Kingdom",
                    "zoneName": "Europe/London",
                },
                "time": TIMEZONE_PAYLOAD,
            },
        )

    place = await _provider(handler).fetch_nearby(LONDON, "2024-03-30")

    assert place.name == "London"
    assert place.pop == 8_961_989
    assert place.cc == "GB"
    assert place.zone_name == "Europe/London"
    assert place.pc is None
    assert seen[0].url.path == "/geotz"
    assert seen[0].url.params["loc"] == "51.5,-0.12"
    assert seen[0].url.params["dt"] == "2024-03-30"


@pytest.mark.asyncio
async def test_fetch_nearby_requires_place():
    provider = _provider(lambda request: httpx.Response(200, json={"time": {}}))
    with pytest.raises(MalformedPayloadError):
        await provider.fetch_nearby(LONDON)


@pytest.mark.asyncio
async def test_fetch_timezone_by_zone_name():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=TIMEZONE_PAYLOAD)

    tz = await _provider(handler).fetch_timezone(LONDON, "Europe/London")

    assert seen[0].url.path == "/timezone"
    assert seen[0].url.params["zn"] == "Europe/London"
    assert "loc" not in seen[0].url.params
    assert tz.abbreviation == "GMT"
    assert tz.week_day == 6
    assert tz.period.start == 1_711_846_800
    assert tz.period.next_gmt_offset == 3600


@pytest.mark.asyncio
async def test_fetch_timezone_falls_back_to_location():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={**TIMEZONE_PAYLOAD, "period": {}})

    tz = await _provider(handler).fetch_timezone(LONDON, "not a zone")

    assert seen[0].url.params["loc"] == "51.5,-0.12"
    assert "zn" not in seen[0].url.params
    assert tz.period is None


@pytest.mark.asyncio
async def test_fetch_timezone_requires_abbreviation():
    provider = _provider(lambda request: httpx.Response(200, json={"zoneName": "Europe/London"}))
    with pytest.raises(MalformedPayloadError):
        await provider.fetch_timezone(LONDON)
