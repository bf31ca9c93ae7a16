"""Location endpoints; each delegates to one resolver or the aggregator."""

from fastapi import APIRouter, Depends, Query

from geocache.api.deps import (
    get_address_resolver,
    get_aggregator,
    get_coordinate,
    get_date,
    get_resolvers,
)
from geocache.core.exceptions import NotFoundError
from geocache.schemas.common import ErrorResponse
from geocache.schemas.geo import Coordinate
from geocache.schemas.location import (
    AddressRequest,
    AstroResponse,
    GeoCodesRequest,
    LocationInfo,
    PoiResponse,
    PostcodesResponse,
    WeatherResponse,
    WikiResponse,
)
from geocache.schemas.postal import PcZone
from geocache.schemas.timezone import GeoTimeInfo
from geocache.services.addresses import AddressResolver
from geocache.services.aggregator import LocationAggregator
from geocache.services.domains import Resolvers
from geocache.services.resolver import ResolveParams
from geocache.utils.datetime import timestamp_from_string

router = APIRouter(tags=["geo"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "invalid loc"},
    404: {"model": ErrorResponse, "description": "no data for this location"},
}


@router.get(
    "/postcodes",
    response_model=PostcodesResponse,
    summary="Nearest postal zones",
    description="Postal zones within `km` of `loc`, nearest first, at most `limit` rows.",
    responses={400: _ERRORS[400]},
)
async def postcodes(
    coord: Coordinate = Depends(get_coordinate),
    km: float = Query(10.0, gt=0, le=100.0),
    limit: int = Query(10, ge=1, le=1000),
    resolvers: Resolvers = Depends(get_resolvers),
):
    res = await resolvers.postcodes.resolve(coord, ResolveParams(radius_km=km, limit=limit))
    rows = res.value or []
    return PostcodesResponse(valid=len(rows) > 0, cached=res.cached, rows=rows)


@router.get(
    "/gtz",
    response_model=GeoTimeInfo,
    summary="Nearest place and current local time",
    description="`dt` (ISO date or datetime) selects the instant; omitted means now.",
    responses={400: _ERRORS[400]},
)
async def geo_time(
    coord: Coordinate = Depends(get_coordinate),
    dt: str | None = Depends(get_date),
    aggregator: LocationAggregator = Depends(get_aggregator),
):
    return await aggregator.geo_time(coord, dt, timestamp_from_string(dt))


@router.post(
    "/addresses",
    response_model=PcZone,
    summary="Postal zone with addresses",
    responses={404: {"model": ErrorResponse, "description": "unknown postal code"}},
)
async def addresses(
    body: AddressRequest,
    resolver: AddressResolver = Depends(get_address_resolver),
):
    return await resolver.resolve_postal_code(body.pc)


@router.get(
    "/weather",
    response_model=WeatherResponse,
    summary="Latest nearby weather observation",
    responses=_ERRORS,
)
async def weather(
    coord: Coordinate = Depends(get_coordinate),
    resolvers: Resolvers = Depends(get_resolvers),
):
    res = await resolvers.weather.resolve(coord)
    if not res.found:
        raise NotFoundError("no weather observation near this location")
    return WeatherResponse(cached=res.cached, weather=res.value)


@router.get(
    "/places-of-interest",
    response_model=PoiResponse,
    summary="Nearby points of interest",
    responses=_ERRORS,
)
async def places_of_interest(
    coord: Coordinate = Depends(get_coordinate),
    resolvers: Resolvers = Depends(get_resolvers),
):
    res = await resolvers.poi.resolve(coord)
    if not res.found:
        raise NotFoundError("points of interest unavailable")
    return PoiResponse(cached=res.cached, items=res.value)


@router.get(
    "/wiki-summaries",
    response_model=WikiResponse,
    summary="Nearby Wikipedia articles",
    responses=_ERRORS,
)
async def wiki_summaries(
    coord: Coordinate = Depends(get_coordinate),
    resolvers: Resolvers = Depends(get_resolvers),
):
    res = await resolvers.wikipedia.resolve(coord)
    if not res.found:
        raise NotFoundError("wikipedia summaries unavailable")
    return WikiResponse(cached=res.cached, items=res.value)


@router.get(
    "/astro",
    response_model=AstroResponse,
    summary="Sun, moon and ascendant positions",
    description="Cached per half hour of `dt`; cached answers report `ageSecs`.",
    responses=_ERRORS,
)
async def astro(
    coord: Coordinate = Depends(get_coordinate),
    dt: str | None = Depends(get_date),
    resolvers: Resolvers = Depends(get_resolvers),
):
    res = await resolvers.astro.resolve(coord, ResolveParams(instant=timestamp_from_string(dt)))
    if not res.found:
        raise NotFoundError("astro data unavailable")
    return AstroResponse(cached=res.cached, astro=res.value)


@router.post(
    "/geo-codes",
    response_model=LocationInfo,
    summary="Everything known about a coordinate",
    description="Place, postal zones (where available), weather, POIs and Wikipedia.",
    responses={400: _ERRORS[400]},
)
async def geo_codes(
    body: GeoCodesRequest,
    aggregator: LocationAggregator = Depends(get_aggregator),
):
    coord = Coordinate.of(body.lat, body.lng, body.alt)
    return await aggregator.aggregate(coord)
