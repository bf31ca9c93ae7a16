from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

from geocache.schemas.astro import AstroSnapshot
from geocache.schemas.base import WireModel
from geocache.schemas.nearby import PointOfInterest, WeatherSnapshot, WikipediaSummary
from geocache.schemas.place import SimplePlace
from geocache.schemas.postal import PcZone


class LocationInfo(WireModel):
    """Composite document for one coordinate; presence flags are derived, never stored."""

    zone: PcZone | None = None
    surrounding: list[PcZone] = Field(default_factory=list)
    places: list[SimplePlace] = Field(default_factory=list)
    states: list[SimplePlace] = Field(default_factory=list)
    weather: WeatherSnapshot | None = None
    poi: list[PointOfInterest] = Field(default_factory=list)
    wikipedia: list[WikipediaSummary] = Field(default_factory=list)
    cached: bool = False

    @classmethod
    def compose(
        cls,
        zones: list[PcZone],
        places: list[SimplePlace],
        states: list[SimplePlace],
        weather: WeatherSnapshot | None,
        poi: list[PointOfInterest],
        wikipedia: list[WikipediaSummary],
        *,
        cached: bool = False,
    ) -> LocationInfo:
        return cls(
            zone=zones[0] if zones else None,
            surrounding=list(zones[1:]),
            places=places,
            states=states,
            weather=weather,
            poi=poi,
            wikipedia=wikipedia,
            cached=cached,
        )

    @computed_field
    @property
    def valid(self) -> bool:
        return len(self.places) > 0

    @computed_field
    @property
    def matched(self) -> bool:
        return len(self.places) > 0

    @computed_field
    @property
    def num(self) -> int:
        return len(self.surrounding) + (1 if self.zone is not None else 0)

    @computed_field(alias="hasWeather")
    @property
    def has_weather(self) -> bool:
        return self.weather is not None

    @computed_field(alias="hasPoi")
    @property
    def has_poi(self) -> bool:
        return len(self.poi) > 0

    @computed_field(alias="hasWikiEntries")
    @property
    def has_wiki_entries(self) -> bool:
        return len(self.wikipedia) > 0

    @computed_field(alias="hasNearestAddress")
    @property
    def has_nearest_address(self) -> bool:
        return self.zone is not None and self.zone.has_addresses

    @computed_field(alias="hasPostalZones")
    @property
    def has_postal_zones(self) -> bool:
        return self.zone is not None


class GeoCodesRequest(BaseModel):
    lat: float = Field(description="Latitude (-90..90)")
    lng: float = Field(default=0.0, description="Longitude (-180..180)")
    alt: float | None = Field(default=None, description="Altitude in metres, optional")


class AddressRequest(BaseModel):
    pc: str = Field(min_length=2, max_length=16, description="Postal code")


class PostcodesResponse(WireModel):
    valid: bool = True
    cached: bool = False
    rows: list[PcZone] = Field(default_factory=list)


class WeatherResponse(WireModel):
    valid: bool = True
    cached: bool = False
    weather: WeatherSnapshot | None = None


class PoiResponse(WireModel):
    valid: bool = True
    cached: bool = False
    items: list[PointOfInterest] = Field(default_factory=list)


class WikiResponse(WireModel):
    valid: bool = True
    cached: bool = False
    items: list[WikipediaSummary] = Field(default_factory=list)


class AstroResponse(WireModel):
    valid: bool = True
    cached: bool = False
    astro: AstroSnapshot | None = None
