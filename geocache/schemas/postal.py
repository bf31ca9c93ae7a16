from __future__ import annotations

from pydantic import Field

from geocache.schemas.base import WireModel
from geocache.schemas.place import PcInfo


class PcZone(WireModel):
    """A postal zone row, nearest-first results carry ``dist`` in metres."""

    pc: str
    addresses: list[str] = Field(default_factory=list)
    lat: float = 0.0
    lng: float = 0.0
    alt: float = 0.0
    northing: float = Field(default=0.0, alias="n")
    easting: float = Field(default=0.0, alias="e")
    country: str = Field(default="", alias="c")
    county: str = Field(default="", alias="cy")
    district: str = Field(default="", alias="d")
    ward_code: str = Field(default="", alias="wc")
    constituency: str = Field(default="", alias="cs")
    local_code: str = Field(default="", alias="lc")
    ward: str = Field(default="", alias="w")
    grid_ref: str = Field(default="", alias="gr")
    modified_at: str = ""
    dist: float = 0.0
    place_name: str | None = Field(default=None, alias="pn")

    @property
    def has_addresses(self) -> bool:
        return len(self.addresses) > 0

    def as_info(self) -> PcInfo:
        return PcInfo(v=self.pc, m=self.dist)
