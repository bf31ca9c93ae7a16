"""GeoNames web services: weather observations, OSM points of interest, Wikipedia."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from geocache.core.exceptions import MalformedPayloadError, UpstreamError
from geocache.providers.http import request_json, require_mapping
from geocache.schemas.geo import Coordinate
from geocache.schemas.nearby import (
    PointOfInterest,
    WeatherSnapshot,
    WikipediaSummary,
    build_pois,
    build_wiki_summaries,
)

PROVIDER = "geonames"

WEATHER_METHOD = "findNearByWeatherJSON"
POI_METHOD = "findNearbyPOIsOSMJSON"
WIKIPEDIA_METHOD = "findNearbyWikipediaJSON"


def _rows(payload: Mapping[str, Any], key: str) -> list[Any]:
    value = payload[key]
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, list):
        return value
    raise MalformedPayloadError(PROVIDER, f"unexpected {key} type")


class GeoNamesProvider:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        username: str,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._username = username
        self._timeout = timeout

    async def _call(
        self, method: str, coord: Coordinate, required: str, **extra: Any
    ) -> Mapping[str, Any]:
        params: dict[str, Any] = {
            "username": self._username,
            "lat": coord.lat,
            "lng": coord.lng,
            **extra,
        }
        payload = await request_json(
            self._client,
            "GET",
            f"{self._base_url}/{method}",
            provider=PROVIDER,
            params=params,
            timeout=self._timeout,
        )
        # GeoNames reports quota and auth failures with 200 and a status object
        if isinstance(payload, Mapping) and isinstance(payload.get("status"), Mapping):
            message = payload["status"].get("message") or "error status"
            raise UpstreamError(PROVIDER, str(message))
        return require_mapping(payload, PROVIDER, required)

    async def fetch_weather(self, coord: Coordinate) -> WeatherSnapshot | None:
        payload = await self._call(WEATHER_METHOD, coord, "weatherObservation")
        observation = payload["weatherObservation"]
        if not isinstance(observation, Mapping):
            raise MalformedPayloadError(PROVIDER, "weatherObservation is not an object")
        return WeatherSnapshot.from_upstream(observation)

    async def fetch_pois(self, coord: Coordinate) -> list[PointOfInterest] | None:
        payload = await self._call(POI_METHOD, coord, "poi", radius=1, style="full")
        return build_pois(_rows(payload, "poi"))

    async def fetch_wiki_summaries(self, coord: Coordinate) -> list[WikipediaSummary] | None:
        payload = await self._call(WIKIPEDIA_METHOD, coord, "geonames")
        return build_wiki_summaries(_rows(payload, "geonames"))
