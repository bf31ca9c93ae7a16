"""Wiring of providers, cache store and services for one application instance."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from geocache.providers.interfaces import (
    AddressProvider,
    AstroProvider,
    NearbyProvider,
    PlaceProvider,
    PostalZoneProvider,
    TimezoneProvider,
)
from geocache.services.addresses import AddressResolver
from geocache.services.aggregator import LocationAggregator
from geocache.services.cache_store import CacheStore, KeyValueBackend
from geocache.services.domains import Resolvers, build_resolvers
from geocache.services.health import HealthService
from geocache.services.negative_checks import NegativeCheckRegistry


@dataclass
class Providers:
    places: PlaceProvider
    timezones: TimezoneProvider
    postal_zones: PostalZoneProvider
    addresses: AddressProvider
    nearby: NearbyProvider
    astro: AstroProvider


@dataclass
class ServiceContainer:
    store: CacheStore
    resolvers: Resolvers
    addresses: AddressResolver
    aggregator: LocationAggregator
    health: HealthService


def build_container(
    backend: KeyValueBackend,
    providers: Providers,
    *,
    postal_zone_countries: Iterable[str] = ("GB",),
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    clock: Callable[[], float] = time.time,
) -> ServiceContainer:
    store = CacheStore(backend)
    resolvers = build_resolvers(
        store,
        places=providers.places,
        timezones=providers.timezones,
        postal_zones=providers.postal_zones,
        nearby=providers.nearby,
        astro=providers.astro,
        postal_zone_countries=postal_zone_countries,
        clock=clock,
    )
    addresses = AddressResolver(
        providers.addresses, providers.postal_zones, NegativeCheckRegistry(store)
    )
    return ServiceContainer(
        store=store,
        resolvers=resolvers,
        addresses=addresses,
        aggregator=LocationAggregator(resolvers, addresses),
        health=HealthService(store, session_factory),
    )
