"""Generic cache-or-fetch cascade shared by every data domain.

1. derive the domain key from the coordinate (plus radius/limit/time bucket)
2. serve from the cache store when present (``refresh`` post-processes hits)
3. otherwise call the upstream fetcher, ``prepare`` the value, store it with
   the domain TTL and return it
4. upstream failures and empty answers come back as absent and are not cached
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

import structlog

from geocache.core.exceptions import MalformedPayloadError, UpstreamError
from geocache.schemas.geo import Coordinate
from geocache.services.cache_store import CacheStore
from geocache.services.geo_keys import clamp_limit, clamp_radius, derive_key

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResolveParams:
    """Per-request query modifiers; unused fields are ignored by a domain."""

    radius_km: float | None = None
    limit: int | None = None
    date: str | None = None
    instant: int | None = None
    zone_name: str | None = None


@dataclass(frozen=True)
class Resolved(Generic[T]):
    value: T | None
    cached: bool = False

    @property
    def found(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class DomainPolicy:
    name: str
    prefix: str
    places: int
    ttl_seconds: int
    value_type: Any
    default_radius_km: float | None = None
    default_limit: int | None = None
    bucket: Callable[[ResolveParams], str] | None = None
    cache_empty: bool = True

    def normalize(self, params: ResolveParams) -> ResolveParams:
        radius = params.radius_km
        limit = params.limit
        if self.default_radius_km is not None:
            radius = clamp_radius(self.default_radius_km if radius is None else radius)
        else:
            radius = None
        if self.default_limit is not None:
            limit = clamp_limit(self.default_limit if limit is None else limit)
        else:
            limit = None
        return replace(params, radius_km=radius, limit=limit)

    def key_for(self, coord: Coordinate, params: ResolveParams) -> str:
        key = derive_key(self.prefix, coord, self.places, params.radius_km, params.limit)
        if self.bucket is not None:
            key += f"_{self.bucket(params)}"
        return key


Fetcher = Callable[[Coordinate, ResolveParams], Awaitable[Any]]


class CachedResolver(Generic[T]):
    def __init__(self, policy: DomainPolicy, store: CacheStore, fetch: Fetcher) -> None:
        self.policy = policy
        self._store = store
        self._fetch = fetch

    def key_for(self, coord: Coordinate, params: ResolveParams | None = None) -> str:
        return self.policy.key_for(coord, self.policy.normalize(params or ResolveParams()))

    async def prepare(self, value: T, coord: Coordinate, params: ResolveParams) -> T:
        """Hook for freshly fetched values, applied before they are cached."""
        return value

    def refresh(self, value: T, coord: Coordinate, params: ResolveParams) -> T:
        """Hook for values served from cache."""
        return value

    def _is_empty(self, value: Any) -> bool:
        return isinstance(value, list) and not value

    async def put(self, coord: Coordinate, value: T, params: ResolveParams | None = None) -> bool:
        """Overwrite the cached entry for ``coord`` (e.g. after enriching it)."""
        return await self._store.set(self.key_for(coord, params), value, self.policy.ttl_seconds)

    async def resolve(self, coord: Coordinate, params: ResolveParams | None = None) -> Resolved[T]:
        params = self.policy.normalize(params or ResolveParams())
        key = self.policy.key_for(coord, params)

        cached = await self._store.get(key, self.policy.value_type)
        if cached is not None and not (self._is_empty(cached) and not self.policy.cache_empty):
            logger.debug("cache_hit", domain=self.policy.name, key=key)
            return Resolved(self.refresh(cached, coord, params), cached=True)

        try:
            value = await self._fetch(coord, params)
        except UpstreamError as exc:
            logger.warning(
                "upstream_failed",
                domain=self.policy.name,
                provider=exc.provider,
                error=str(exc),
                malformed=isinstance(exc, MalformedPayloadError),
            )
            return Resolved(None)

        if value is None:
            return Resolved(None)
        if self._is_empty(value) and not self.policy.cache_empty:
            return Resolved(value)

        value = await self.prepare(value, coord, params)
        # a started write completes even if the request is cancelled
        stored = await asyncio.shield(self._store.set(key, value, self.policy.ttl_seconds))
        logger.info("cache_fill", domain=self.policy.name, key=key, stored=stored)
        return Resolved(value)
