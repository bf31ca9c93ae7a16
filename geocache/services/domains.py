"""Domain instances of the cached resolver cascade."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from geocache.providers.interfaces import (
    AstroProvider,
    NearbyProvider,
    PlaceProvider,
    PostalZoneProvider,
    TimezoneProvider,
)
from geocache.schemas.astro import AstroSnapshot
from geocache.schemas.geo import Coordinate
from geocache.schemas.nearby import PointOfInterest, WeatherSnapshot, WikipediaSummary
from geocache.schemas.place import PlaceSnapshot
from geocache.schemas.postal import PcZone
from geocache.schemas.timezone import TzSnapshot
from geocache.services.cache_store import CacheStore
from geocache.services.resolver import CachedResolver, DomainPolicy, ResolveParams
from geocache.services.tz_reconciler import reconcile, with_solar_offset

MINUTE = 60
DAY = 24 * 60 * 60
ASTRO_BUCKET_SECONDS = 30 * MINUTE


def _date_bucket(params: ResolveParams) -> str:
    return params.date or "c"


def _astro_bucket(params: ResolveParams) -> str:
    if params.instant is None:
        return "c"
    return str(params.instant // ASTRO_BUCKET_SECONDS)


PLACE = DomainPolicy("place", "place", places=5, ttl_seconds=0, value_type=PlaceSnapshot)
NEAREST_POSTCODE = DomainPolicy(
    "nearest_postcode",
    "pc",
    places=6,
    ttl_seconds=0,
    value_type=list[PcZone],
    default_radius_km=15.0,
    default_limit=1,
    cache_empty=False,
)
POSTCODES = DomainPolicy(
    "postcodes",
    "pc",
    places=6,
    ttl_seconds=0,
    value_type=list[PcZone],
    default_radius_km=10.0,
    default_limit=10,
    cache_empty=False,
)
POSTAL_ZONES = DomainPolicy(
    "postal_zones",
    "pzones",
    places=6,
    ttl_seconds=0,
    value_type=list[PcZone],
    default_radius_km=5.0,
    default_limit=20,
    cache_empty=False,
)
TIMEZONE = DomainPolicy(
    "timezone",
    "tz",
    places=2,
    ttl_seconds=15 * MINUTE,
    value_type=TzSnapshot,
    bucket=_date_bucket,
)
WEATHER = DomainPolicy(
    "weather", "weather", places=1, ttl_seconds=30 * MINUTE, value_type=WeatherSnapshot
)
POINTS_OF_INTEREST = DomainPolicy(
    "poi", "plofint", places=3, ttl_seconds=31 * DAY, value_type=list[PointOfInterest]
)
WIKIPEDIA = DomainPolicy(
    "wikipedia", "wiki", places=3, ttl_seconds=3 * 31 * DAY, value_type=list[WikipediaSummary]
)
ASTRO = DomainPolicy(
    "astro",
    "astro",
    places=2,
    ttl_seconds=30 * MINUTE,
    value_type=AstroSnapshot,
    bucket=_astro_bucket,
)


class TimezoneResolver(CachedResolver[TzSnapshot]):
    """Cached snapshots are reconciled to the requested instant (or now)."""

    def __init__(
        self,
        store: CacheStore,
        provider: TimezoneProvider,
        clock: Callable[[], float] = time.time,
    ) -> None:
        async def _fetch(coord: Coordinate, params: ResolveParams) -> TzSnapshot | None:
            return await provider.fetch_timezone(coord, params.zone_name, params.date)

        super().__init__(TIMEZONE, store, _fetch)
        self._clock = clock

    async def prepare(
        self, value: TzSnapshot, coord: Coordinate, params: ResolveParams
    ) -> TzSnapshot:
        return with_solar_offset(value, coord.lng)

    def refresh(self, value: TzSnapshot, coord: Coordinate, params: ResolveParams) -> TzSnapshot:
        instant = int(self._clock()) if params.instant is None else params.instant
        return with_solar_offset(reconcile(value, instant), coord.lng)


class AstroResolver(CachedResolver[AstroSnapshot]):
    def __init__(
        self,
        store: CacheStore,
        provider: AstroProvider,
        clock: Callable[[], float] = time.time,
    ) -> None:
        async def _fetch(coord: Coordinate, params: ResolveParams) -> AstroSnapshot | None:
            return await provider.fetch_astro(coord, params.instant)

        super().__init__(ASTRO, store, _fetch)
        self._clock = clock

    def refresh(
        self, value: AstroSnapshot, coord: Coordinate, params: ResolveParams
    ) -> AstroSnapshot:
        return value.model_copy(update={"age_secs": int(self._clock()) - value.time})


class PlaceResolver(CachedResolver[PlaceSnapshot]):
    """Fresh places in postal-zone countries get the nearest postcode attached."""

    def __init__(
        self,
        store: CacheStore,
        provider: PlaceProvider,
        nearest_postcode: CachedResolver[list[PcZone]],
        postal_zone_countries: Iterable[str],
    ) -> None:
        async def _fetch(coord: Coordinate, params: ResolveParams) -> PlaceSnapshot | None:
            return await provider.fetch_nearby(coord, params.date)

        super().__init__(PLACE, store, _fetch)
        self._nearest_postcode = nearest_postcode
        self._countries = {cc.upper() for cc in postal_zone_countries}

    def supports_postal_zones(self, place: PlaceSnapshot) -> bool:
        return place.cc is not None and place.cc.upper() in self._countries

    async def prepare(
        self, value: PlaceSnapshot, coord: Coordinate, params: ResolveParams
    ) -> PlaceSnapshot:
        if not self.supports_postal_zones(value):
            return value
        nearest = await self._nearest_postcode.resolve(coord)
        if not nearest.value:
            return value
        return value.model_copy(update={"pc": nearest.value[0].as_info()})


@dataclass
class Resolvers:
    place: PlaceResolver
    timezone: TimezoneResolver
    postcodes: CachedResolver[list[PcZone]]
    postal_zones: CachedResolver[list[PcZone]]
    weather: CachedResolver[WeatherSnapshot]
    poi: CachedResolver[list[PointOfInterest]]
    wikipedia: CachedResolver[list[WikipediaSummary]]
    astro: AstroResolver


def build_resolvers(
    store: CacheStore,
    *,
    places: PlaceProvider,
    timezones: TimezoneProvider,
    postal_zones: PostalZoneProvider,
    nearby: NearbyProvider,
    astro: AstroProvider,
    postal_zone_countries: Iterable[str] = ("GB",),
    clock: Callable[[], float] = time.time,
) -> Resolvers:
    async def _zones(coord: Coordinate, params: ResolveParams) -> list[PcZone]:
        return await postal_zones.fetch_nearby_zones(coord, params.radius_km, params.limit)

    async def _weather(coord: Coordinate, params: ResolveParams) -> WeatherSnapshot | None:
        return await nearby.fetch_weather(coord)

    async def _pois(coord: Coordinate, params: ResolveParams) -> list[PointOfInterest] | None:
        return await nearby.fetch_pois(coord)

    async def _wiki(coord: Coordinate, params: ResolveParams) -> list[WikipediaSummary] | None:
        return await nearby.fetch_wiki_summaries(coord)

    nearest_postcode: CachedResolver[list[PcZone]] = CachedResolver(
        NEAREST_POSTCODE, store, _zones
    )
    return Resolvers(
        place=PlaceResolver(store, places, nearest_postcode, postal_zone_countries),
        timezone=TimezoneResolver(store, timezones, clock=clock),
        postcodes=CachedResolver(POSTCODES, store, _zones),
        postal_zones=CachedResolver(POSTAL_ZONES, store, _zones),
        weather=CachedResolver(WEATHER, store, _weather),
        poi=CachedResolver(POINTS_OF_INTEREST, store, _pois),
        wikipedia=CachedResolver(WIKIPEDIA, store, _wiki),
        astro=AstroResolver(store, astro, clock=clock),
    )
