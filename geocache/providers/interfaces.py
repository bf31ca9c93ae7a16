"""Upstream capability interfaces consumed by the resolvers.

Implementations raise ``UpstreamError`` (or ``MalformedPayloadError``) on
failure; returning None means the upstream answered but has nothing to offer.
"""

from __future__ import annotations

from typing import Protocol

from geocache.schemas.astro import AstroSnapshot
from geocache.schemas.geo import Coordinate
from geocache.schemas.nearby import PointOfInterest, WeatherSnapshot, WikipediaSummary
from geocache.schemas.place import PlaceSnapshot
from geocache.schemas.postal import PcZone
from geocache.schemas.timezone import TzSnapshot


class PlaceProvider(Protocol):
    async def fetch_nearby(
        self, coord: Coordinate, date: str | None = None
    ) -> PlaceSnapshot | None: ...


class TimezoneProvider(Protocol):
    async def fetch_timezone(
        self, coord: Coordinate, zone_name: str | None = None, date: str | None = None
    ) -> TzSnapshot | None: ...


class PostalZoneProvider(Protocol):
    async def fetch_nearby_zones(
        self, coord: Coordinate, radius_km: float, limit: int
    ) -> list[PcZone]: ...

    async def fetch_zone(self, postal_code: str) -> PcZone | None: ...

    async def update_addresses(self, postal_code: str, addresses: list[str]) -> bool: ...


class AddressProvider(Protocol):
    async def fetch_addresses(self, postal_code: str) -> list[str] | None: ...


class NearbyProvider(Protocol):
    async def fetch_weather(self, coord: Coordinate) -> WeatherSnapshot | None: ...

    async def fetch_pois(self, coord: Coordinate) -> list[PointOfInterest] | None: ...

    async def fetch_wiki_summaries(self, coord: Coordinate) -> list[WikipediaSummary] | None: ...


class AstroProvider(Protocol):
    async def fetch_astro(
        self, coord: Coordinate, instant: int | None = None
    ) -> AstroSnapshot | None: ...
