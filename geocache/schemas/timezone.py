from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from geocache.schemas.base import WireModel
from geocache.schemas.place import PlaceSnapshot
from geocache.utils import extract


class TzPeriod(WireModel):
    """The next DST transition known when the snapshot was taken."""

    start: int | None = None
    end: int | None = None
    next_gmt_offset: int | None = None

    @classmethod
    def from_upstream(cls, row: Mapping[str, Any]) -> TzPeriod:
        next_offset = extract.as_opt_int(row, "next_gmt_offset")
        if next_offset is None:
            next_offset = extract.as_opt_int(row, "nextGmtOffset")
        return cls(
            start=extract.as_opt_int(row, "start"),
            end=extract.as_opt_int(row, "end"),
            next_gmt_offset=next_offset,
        )


class TzSnapshot(WireModel):
    abbreviation: str = ""
    country_code: str = ""
    dst: bool = False
    gmt_offset: int = 0
    local_dt: str = ""
    period: TzPeriod | None = None
    ref_unix: int = 0
    solar_utc_offset: int = 0
    utc: str = ""
    week_day: int = 0
    zone_name: str = ""

    @classmethod
    def from_upstream(cls, row: Mapping[str, Any]) -> TzSnapshot:
        week_day = 0
        week_day_row = extract.as_mapping(row, "weekDay")
        if week_day_row is not None:
            week_day = extract.as_int(week_day_row, "iso")
        period = None
        period_row = extract.as_mapping(row, "period")
        if period_row is not None:
            candidate = TzPeriod.from_upstream(period_row)
            if candidate.start is not None or candidate.end is not None:
                period = candidate
        return cls(
            abbreviation=extract.as_str(row, "abbreviation"),
            country_code=extract.as_str(row, "countryCode"),
            dst=extract.as_bool(row, "dst"),
            gmt_offset=extract.as_int(row, "gmtOffset"),
            local_dt=extract.as_str(row, "localDt"),
            period=period,
            ref_unix=extract.as_int(row, "refUnix"),
            solar_utc_offset=extract.as_int(row, "solarUtcOffset"),
            utc=extract.as_str(row, "utc"),
            week_day=week_day,
            zone_name=extract.as_str(row, "zoneName"),
        )


class GeoTimeInfo(WireModel):
    place: PlaceSnapshot | None = None
    time: TzSnapshot | None = None
    cached: bool = False
    valid: bool = True
