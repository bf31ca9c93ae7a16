from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from geocache.schemas.base import WireModel
from geocache.utils import extract


class PcInfo(WireModel):
    """Nearest postcode summary: code and distance in metres."""

    v: str
    m: float


class SimplePlace(WireModel):
    lat: float
    lng: float
    name: str


class PlaceSnapshot(WireModel):
    """Nearest named place with its administrative hierarchy."""

    lat: float = 0.0
    lng: float = 0.0
    name: str = ""
    toponym: str = ""
    fcode: str = ""
    distance: float = 0.0
    pop: int = 0
    admin_name: str = ""
    region: str = ""
    cc: str | None = None
    country_name: str = ""
    zone_name: str | None = Field(default=None, description="IANA zone name hint")
    pc: PcInfo | None = None

    @classmethod
    def from_upstream(cls, row: Mapping[str, Any]) -> PlaceSnapshot:
        return cls(
            lat=extract.as_float(row, "lat"),
            lng=extract.as_float(row, "lng"),
            name=extract.as_str(row, "name"),
            toponym=extract.as_str(row, "toponym"),
            fcode=extract.as_str(row, "fcode"),
            distance=extract.as_float(row, "distance"),
            pop=max(0, extract.as_int(row, "population")),
            admin_name=extract.as_str(row, "adminName"),
            region=extract.as_str(row, "region"),
            cc=extract.as_opt_str(row, "cc"),
            country_name=extract.as_str(row, "countryName"),
            zone_name=extract.as_opt_str(row, "zoneName"),
        )

    def to_places(self) -> list[SimplePlace]:
        return [SimplePlace(lat=self.lat, lng=self.lng, name=self.name)]

    def to_states(self) -> list[SimplePlace]:
        return [
            SimplePlace(lat=self.lat, lng=self.lng, name=name)
            for name in (self.admin_name, self.region, self.country_name)
        ]
