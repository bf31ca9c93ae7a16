"""Flat value records for weather, points of interest and Wikipedia summaries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from geocache.schemas.base import WireModel
from geocache.utils import extract


class WeatherSnapshot(WireModel):
    lat: float = 0.0
    lng: float = 0.0
    datetime: str = ""
    temperature: float = 0.0
    humidity: float = 0.0
    wind_speed: float = 0.0
    dew_point: float = 0.0
    station_name: str = ""
    clouds: str = ""

    @classmethod
    def from_upstream(cls, row: Mapping[str, Any]) -> WeatherSnapshot:
        return cls(
            lat=extract.as_float(row, "lat"),
            lng=extract.as_float(row, "lng"),
            datetime=extract.as_str(row, "datetime"),
            temperature=extract.as_float(row, "temperature"),
            humidity=extract.as_float(row, "humidity"),
            wind_speed=extract.as_float(row, "windSpeed"),
            dew_point=extract.as_float(row, "dewPoint"),
            station_name=extract.as_str(row, "stationName"),
            clouds=extract.as_str(row, "clouds"),
        )


class PointOfInterest(WireModel):
    lat: float = 0.0
    lng: float = 0.0
    distance: float = 0.0
    name: str = ""
    type_class: str = ""
    type_name: str = ""

    @classmethod
    def from_upstream(cls, row: Mapping[str, Any]) -> PointOfInterest:
        type_name = extract.as_str(row, "typeName")
        name = extract.as_str(row, "name").strip()
        return cls(
            lat=extract.as_float(row, "lat"),
            lng=extract.as_float(row, "lng"),
            distance=extract.as_float(row, "distance"),
            # unnamed features are labelled by their type
            name=name or type_name,
            type_class=extract.as_str(row, "typeClass"),
            type_name=type_name,
        )


class WikipediaSummary(WireModel):
    lat: float = 0.0
    lng: float = 0.0
    summary: str = ""
    title: str = ""
    elevation: float = 0.0
    distance: float = 0.0
    rank: int = -1
    lang: str = ""
    wikipedia_url: str = ""

    @classmethod
    def from_upstream(cls, row: Mapping[str, Any]) -> WikipediaSummary:
        rank = extract.as_opt_int(row, "rank")
        return cls(
            lat=extract.as_float(row, "lat"),
            lng=extract.as_float(row, "lng"),
            summary=extract.as_str(row, "summary"),
            title=extract.as_str(row, "title"),
            elevation=extract.as_float(row, "elevation"),
            distance=extract.as_float(row, "distance"),
            rank=-1 if rank is None else rank,
            lang=extract.as_str(row, "lang"),
            wikipedia_url=extract.as_str(row, "wikipediaUrl"),
        )


def build_pois(rows: list[Any]) -> list[PointOfInterest]:
    """Build points of interest, keeping only the first entry per name."""

    seen: set[str] = set()
    pois: list[PointOfInterest] = []
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        poi = PointOfInterest.from_upstream(row)
        if poi.name in seen:
            continue
        seen.add(poi.name)
        pois.append(poi)
    return pois


def build_wiki_summaries(rows: list[Any]) -> list[WikipediaSummary]:
    return [WikipediaSummary.from_upstream(row) for row in rows if isinstance(row, Mapping)]
