"""Lazy, negative-check-gated address lookup for postal zones."""

from __future__ import annotations

import structlog

from geocache.core.exceptions import InfrastructureError, NotFoundError, UpstreamError
from geocache.providers.interfaces import AddressProvider, PostalZoneProvider
from geocache.schemas.postal import PcZone
from geocache.services.negative_checks import ADDRESS_CHECK_TTL_SECONDS, NegativeCheckRegistry

logger = structlog.get_logger(__name__)


class AddressResolver:
    def __init__(
        self,
        provider: AddressProvider,
        zones: PostalZoneProvider,
        registry: NegativeCheckRegistry,
        check_ttl_seconds: int = ADDRESS_CHECK_TTL_SECONDS,
    ) -> None:
        self._provider = provider
        self._zones = zones
        self._registry = registry
        self._check_ttl = check_ttl_seconds

    async def ensure_addresses(self, zone: PcZone) -> tuple[PcZone, bool]:
        """Return ``(zone, updated)``; ``updated`` is True when addresses were fetched.

        A zone that already has addresses, or whose code was recently looked up
        without success, is returned untouched and no upstream call is made.
        """

        if zone.has_addresses:
            return zone, False
        if await self._registry.has_been_checked(zone.pc):
            logger.debug("address_lookup_skipped", pc=zone.pc)
            return zone, False

        try:
            addresses = await self._provider.fetch_addresses(zone.pc)
        except UpstreamError as exc:
            logger.warning("address_lookup_failed", pc=zone.pc, error=str(exc))
            addresses = None

        if not addresses:
            await self._registry.mark_checked(zone.pc, self._check_ttl)
            return zone, False

        try:
            await self._zones.update_addresses(zone.pc, addresses)
        except UpstreamError as exc:
            logger.warning("address_persist_failed", pc=zone.pc, error=str(exc))
        logger.info("address_lookup_filled", pc=zone.pc, count=len(addresses))
        return zone.model_copy(update={"addresses": addresses}), True

    async def resolve_postal_code(self, postal_code: str) -> PcZone:
        try:
            zone = await self._zones.fetch_zone(postal_code)
        except UpstreamError as exc:
            raise InfrastructureError("postal zone store unavailable") from exc
        if zone is None:
            raise NotFoundError(f"postal code not found: {postal_code}")
        zone, _ = await self.ensure_addresses(zone)
        return zone
