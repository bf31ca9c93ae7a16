"""PostgreSQL-backed postal zone store."""

from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy import Select, and_, cast, func, literal, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.types import Numeric

from geocache.core.exceptions import UpstreamError
from geocache.models.postal_zone import PostalZone
from geocache.schemas.geo import Coordinate
from geocache.schemas.postal import PcZone
from geocache.services.geo_keys import clamp_limit, clamp_radius

PROVIDER = "postal_zones"
EARTH_RADIUS_M = 6_371_000.0


def _iso(dt: datetime | None) -> str:
    if not dt or (hasattr(dt, "year") and dt.year < 1970):
        return ""
    return dt.isoformat()


def _to_zone(row: PostalZone, dist: float = 0.0) -> PcZone:
    return PcZone(
        pc=row.pc,
        addresses=list(row.addresses or []),
        lat=float(row.latitude or 0.0),
        lng=float(row.longitude or 0.0),
        alt=float(row.altitude or 0.0),
        northing=float(row.northing or 0.0),
        easting=float(row.easting or 0.0),
        country=row.country or "",
        county=row.county or "",
        district=row.district or "",
        ward_code=row.ward_code or "",
        constituency=row.constituency or "",
        local_code=row.local_code or "",
        ward=row.ward or "",
        grid_ref=row.grid_ref or "",
        modified_at=_iso(row.modified_at),
        dist=float(dist or 0.0),
    )


def nearby_statement(lat: float, lng: float, radius_km: float, limit: int) -> Select:
    """Zones within ``radius_km`` of the point, nearest first (Haversine, metres)."""

    lat_rad = func.radians(PostalZone.latitude)
    lng_rad = func.radians(PostalZone.longitude)
    lat0_rad = func.radians(literal(float(lat)))
    lng0_rad = func.radians(literal(float(lng)))

    dlat = lat_rad - lat0_rad
    dlng = lng_rad - lng0_rad

    a = func.pow(func.sin(dlat / 2.0), 2) + func.cos(lat0_rad) * func.cos(lat_rad) * func.pow(
        func.sin(dlng / 2.0), 2
    )
    c = 2.0 * func.asin(func.sqrt(func.least(1.0, a)))
    dist_m = cast(EARTH_RADIUS_M * c, Numeric(18, 3))

    return (
        select(PostalZone, dist_m.label("dist_m"))
        .where(and_(PostalZone.latitude.is_not(None), PostalZone.longitude.is_not(None)))
        .where(dist_m <= clamp_radius(radius_km) * 1000.0)
        .order_by(dist_m.asc(), PostalZone.pc.asc())
        .limit(clamp_limit(limit))
    )


class PostalZoneRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_nearby_zones(
        self, coord: Coordinate, radius_km: float, limit: int
    ) -> list[PcZone]:
        stmt = nearby_statement(coord.lat, coord.lng, radius_km, limit)
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamError(PROVIDER, str(exc)) from exc
        return [_to_zone(zone, dist) for zone, dist in rows]

    async def fetch_zone(self, postal_code: str) -> PcZone | None:
        pc = " ".join(postal_code.strip().upper().split())
        stmt = select(PostalZone).where(func.upper(PostalZone.pc) == pc)
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).scalars().first()
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamError(PROVIDER, str(exc)) from exc
        return _to_zone(row) if row is not None else None

    async def update_addresses(self, postal_code: str, addresses: list[str]) -> bool:
        stmt = (
            update(PostalZone)
            .where(PostalZone.pc == postal_code)
            .values(addresses=addresses, modified_at=func.now())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamError(PROVIDER, str(exc)) from exc
        structlog.get_logger(__name__).info(
            "postal_zone_addresses_saved", pc=postal_code, count=len(addresses)
        )
        return bool(result.rowcount)
