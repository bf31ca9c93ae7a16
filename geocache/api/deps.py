"""API dependency helpers and service providers."""

from fastapi import Depends, Request

from geocache.core.exceptions import InfrastructureError
from geocache.schemas.geo import Coordinate
from geocache.services.addresses import AddressResolver
from geocache.services.aggregator import LocationAggregator
from geocache.services.container import ServiceContainer
from geocache.services.domains import Resolvers
from geocache.services.health import HealthService
from geocache.utils.datetime import is_valid_date_string

__all__ = [
    "get_services",
    "get_resolvers",
    "get_aggregator",
    "get_address_resolver",
    "get_health_service",
    "get_coordinate",
    "get_date",
]


def get_services(request: Request) -> ServiceContainer:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise InfrastructureError("services are not initialised")
    return services


def get_resolvers(services: ServiceContainer = Depends(get_services)) -> Resolvers:
    return services.resolvers


def get_aggregator(services: ServiceContainer = Depends(get_services)) -> LocationAggregator:
    return services.aggregator


def get_address_resolver(services: ServiceContainer = Depends(get_services)) -> AddressResolver:
    return services.addresses


def get_health_service(services: ServiceContainer = Depends(get_services)) -> HealthService:
    return services.health


def get_coordinate(loc: str | None = None) -> Coordinate:
    """``loc=lat,lng[,alt]``; the domain ValidationError becomes a 400."""
    return Coordinate.parse(loc)


def get_date(dt: str | None = None) -> str | None:
    # unparsable dates are ignored rather than rejected
    return dt if is_valid_date_string(dt) else None
