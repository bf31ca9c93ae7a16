"""GeoTimeZone service: nearest place with zone hint, and timezone snapshots."""

from __future__ import annotations

import re
from collections.abc import Mapping

import httpx

from geocache.core.exceptions import MalformedPayloadError
from geocache.providers.http import request_json, require_mapping
from geocache.schemas.geo import Coordinate
from geocache.schemas.place import PlaceSnapshot
from geocache.schemas.timezone import TzSnapshot

PROVIDER = "geotimezone"

# Area/Location[/Sublocation] or a bare abbreviation such as UTC
_ZONE_NAME = re.compile(r"^(?:[A-Z][A-Za-z_+-]+(?:/[A-Za-z0-9_+-]+){1,2}|[A-Z]{2,5}[0-9+-]*)$")


def is_valid_zone_name(value: str | None) -> bool:
    return bool(value) and _ZONE_NAME.match(value.strip()) is not None


class GeoTimeZoneProvider:
    def __init__(self, client: httpx.AsyncClient, *, base_url: str, timeout: float = 10.0):
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def fetch_nearby(self, coord: Coordinate, date: str | None = None) -> PlaceSnapshot | None:
        params = {"loc": coord.to_query()}
        if date:
            params["dt"] = date
        payload = await request_json(
            self._client,
            "GET",
            f"{self._base_url}/geotz",
            provider=PROVIDER,
            params=params,
            timeout=self._timeout,
        )
        place = require_mapping(payload, PROVIDER, "place")["place"]
        if not isinstance(place, Mapping):
            raise MalformedPayloadError(PROVIDER, "place is not an object")
        return PlaceSnapshot.from_upstream(place)

    async def fetch_timezone(
        self, coord: Coordinate, zone_name: str | None = None, date: str | None = None
    ) -> TzSnapshot | None:
        if is_valid_zone_name(zone_name):
            params = {"zn": zone_name.strip()}
        else:
            params = {"loc": coord.to_query()}
        if date:
            params["dt"] = date
        payload = await request_json(
            self._client,
            "GET",
            f"{self._base_url}/timezone",
            provider=PROVIDER,
            params=params,
            timeout=self._timeout,
        )
        return TzSnapshot.from_upstream(require_mapping(payload, PROVIDER, "abbreviation"))
