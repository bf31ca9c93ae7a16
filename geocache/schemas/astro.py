"""Ephemeris window returned by the astro service.

The upstream payload carries a batch of body longitudes sampled across
``start``..``end`` every ``interval`` days, with ``currentIndex`` pointing at
the sample nearest to the requested time. Event times (rise, set, moon phases)
arrive as Julian days and are converted to unix seconds here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from geocache.schemas.base import WireModel
from geocache.utils import extract
from geocache.utils.datetime import julian_day_to_unixtime

_SUN_EVENTS = ("rise", "set", "mc", "ic")
_MAX_INTERVAL_SECS = 4_294_967_295


def _body_positions(data: Mapping[str, Any], key: str) -> list[float]:
    values = data.get("values")
    if isinstance(values, Mapping):
        return extract.as_floats(values.get(key))
    if isinstance(values, list):
        for item in values:
            if isinstance(item, Mapping) and item.get("key") == key:
                return extract.as_floats(item.get("values"))
    return []


def _current(positions: list[float], data: Mapping[str, Any]) -> float:
    index = extract.as_int(data, "currentIndex")
    if 0 <= index < len(positions):
        return positions[index]
    return 0.0


def _unix(data: Mapping[str, Any], key: str) -> int:
    return int(extract.as_float(extract.as_mapping(data, key) or {}, "unix"))


class AscendantData(WireModel):
    lng: float = 0.0
    positions: list[float] = Field(default_factory=list)

    @classmethod
    def from_upstream(cls, data: Mapping[str, Any]) -> AscendantData:
        positions = _body_positions(data, "as")
        return cls(lng=_current(positions, data), positions=positions)


class MoonPhase(WireModel):
    num: int
    ts: int

    @classmethod
    def from_upstream(cls, row: Mapping[str, Any]) -> MoonPhase:
        num = extract.as_int(row, "num")
        return cls(
            num=num if 0 <= num < 5 else 0,
            ts=julian_day_to_unixtime(extract.as_float(row, "jd")),
        )

    @property
    def valid(self) -> bool:
        return self.num > 0


class MoonData(WireModel):
    lng: float = 0.0
    positions: list[float] = Field(default_factory=list)
    phase: int = 0
    sun_angle: float = 0.0
    waxing: bool = False
    phases: list[MoonPhase] = Field(default_factory=list)

    @classmethod
    def from_upstream(cls, data: Mapping[str, Any]) -> MoonData:
        positions = _body_positions(data, "mo")
        moon = extract.as_mapping(data, "moon") or {}
        phase_rows = extract.as_list(moon, "phases") or extract.as_list(moon, "nextPhases")
        phases = [
            MoonPhase.from_upstream(row) for row in phase_rows if isinstance(row, Mapping)
        ]
        phases = [phase for phase in phases if phase.valid]
        return cls(
            lng=_current(positions, data),
            positions=positions,
            phase=extract.as_int(moon, "phase"),
            sun_angle=extract.as_float(moon, "sunAngle"),
            waxing=extract.as_bool(moon, "waxing"),
            phases=phases,
        )


class SunData(WireModel):
    lng: float = 0.0
    positions: list[float] = Field(default_factory=list)
    rise: int | None = None
    set: int | None = None
    mc: int | None = None
    ic: int | None = None
    min: float = 0.0
    max: float = 0.0

    @classmethod
    def from_upstream(cls, data: Mapping[str, Any]) -> SunData:
        positions = _body_positions(data, "su")
        events: dict[str, Any] = {}
        for row in extract.as_list(data, "sunRiseSets"):
            if not isinstance(row, Mapping):
                continue
            key = extract.as_str(row, "key")
            value = extract.as_float(row, "value")
            if key in _SUN_EVENTS:
                events[key] = julian_day_to_unixtime(value)
            elif key in ("min", "max"):
                events[key] = value
        return cls(lng=_current(positions, data), positions=positions, **events)


class AstroSnapshot(WireModel):
    start: int = 0
    time: int = 0
    end: int = 0
    interval_secs: int = 0
    sun: SunData | None = None
    moon: MoonData | None = None
    ascendant: AscendantData | None = None
    age_secs: int | None = None

    @classmethod
    def from_upstream(cls, data: Mapping[str, Any]) -> AstroSnapshot:
        interval_days = extract.as_float(extract.as_mapping(data, "interval") or {}, "days")
        interval_secs = round(interval_days * 86400.0)
        if not 0 <= interval_secs <= _MAX_INTERVAL_SECS:
            interval_secs = 0
        return cls(
            start=_unix(data, "start"),
            time=_unix(data, "date"),
            end=_unix(data, "end"),
            interval_secs=interval_secs,
            sun=SunData.from_upstream(data),
            moon=MoonData.from_upstream(data),
            ascendant=AscendantData.from_upstream(data),
        )
