"""Compose per-domain resolvers into the location documents served by the API."""

from __future__ import annotations

import asyncio

import structlog

from geocache.schemas.geo import Coordinate
from geocache.schemas.location import LocationInfo
from geocache.schemas.place import PlaceSnapshot
from geocache.schemas.postal import PcZone
from geocache.schemas.timezone import GeoTimeInfo
from geocache.services.addresses import AddressResolver
from geocache.services.domains import Resolvers
from geocache.services.resolver import ResolveParams

logger = structlog.get_logger(__name__)


class LocationAggregator:
    def __init__(self, resolvers: Resolvers, addresses: AddressResolver) -> None:
        self._resolvers = resolvers
        self._addresses = addresses

    async def _postal_zones(
        self, coord: Coordinate, place: PlaceSnapshot, params: ResolveParams
    ) -> list[PcZone]:
        bundle = await self._resolvers.postal_zones.resolve(coord, params)
        zones = list(bundle.value or [])
        if not zones:
            return zones

        # only the nearest zone gets a lazy address lookup
        nearest = zones[0].model_copy(update={"place_name": place.name or None})
        nearest, updated = await self._addresses.ensure_addresses(nearest)
        zones[0] = nearest
        if updated:
            await self._resolvers.postal_zones.put(coord, zones, params)
        return zones

    async def aggregate(
        self, coord: Coordinate, params: ResolveParams | None = None
    ) -> LocationInfo:
        params = params or ResolveParams()
        place_res = await self._resolvers.place.resolve(coord, params)
        place = place_res.value

        zones: list[PcZone] = []
        if place is not None and self._resolvers.place.supports_postal_zones(place):
            zones = await self._postal_zones(coord, place, params)

        weather_res, poi_res, wiki_res = await asyncio.gather(
            self._resolvers.weather.resolve(coord),
            self._resolvers.poi.resolve(coord),
            self._resolvers.wikipedia.resolve(coord),
        )

        info = LocationInfo.compose(
            zones,
            place.to_places() if place is not None else [],
            place.to_states() if place is not None else [],
            weather_res.value,
            poi_res.value or [],
            wiki_res.value or [],
            cached=place_res.cached,
        )
        logger.info(
            "location_aggregated",
            lat=coord.lat,
            lng=coord.lng,
            cached=info.cached,
            zones=info.num,
            weather=info.has_weather,
            poi=info.has_poi,
            wiki=info.has_wiki_entries,
        )
        return info

    async def geo_time(
        self, coord: Coordinate, date: str | None = None, instant: int | None = None
    ) -> GeoTimeInfo:
        place_res = await self._resolvers.place.resolve(coord, ResolveParams(date=date))
        place = place_res.value
        tz_params = ResolveParams(
            date=date,
            instant=instant,
            zone_name=place.zone_name if place is not None else None,
        )
        tz_res = await self._resolvers.timezone.resolve(coord, tz_params)
        return GeoTimeInfo(
            place=place,
            time=tz_res.value,
            cached=place_res.cached,
            valid=place is not None or tz_res.found,
        )
