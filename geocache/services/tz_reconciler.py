"""Bring a cached timezone snapshot forward to a target instant.

A snapshot stores the offset active when it was fetched plus the next DST
transition (``period``). Once the target instant reaches ``period.start`` the
next offset applies. ``abbreviation``, ``dst`` and ``period`` are left as
cached until the next upstream refresh; within the 15 minute TTL a stale
abbreviation is an accepted approximation.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime

from geocache.schemas.timezone import TzSnapshot
from geocache.utils.datetime import simple_iso


def solar_offset_minutes(lng: float) -> float:
    """Mean solar time offset from UTC, from longitude alone (4 minutes per degree).

    Longitudes of +180 and -180 both map to -720, the same wall-clock offset as +720.
    """

    return ((lng + 540.0) % 360.0 - 180.0) * 4.0


def solar_offset_seconds(lng: float) -> int:
    return int(round(solar_offset_minutes(lng) * 60.0))


def active_offset(snapshot: TzSnapshot, target_instant: int) -> int:
    period = snapshot.period
    if period is None or period.start is None or target_instant < period.start:
        return snapshot.gmt_offset
    if period.next_gmt_offset is None:
        return snapshot.gmt_offset
    return period.next_gmt_offset


def reconcile(snapshot: TzSnapshot, target_instant: int | None = None) -> TzSnapshot:
    """Return a copy of ``snapshot`` recomputed for ``target_instant`` (default: now)."""

    ts = int(time.time()) if target_instant is None else int(target_instant)
    offset = active_offset(snapshot, ts)
    local_ts = ts + offset
    return snapshot.model_copy(
        update={
            "gmt_offset": offset,
            "local_dt": simple_iso(local_ts),
            "week_day": datetime.fromtimestamp(local_ts, UTC).isoweekday(),
            "ref_unix": ts,
            "utc": simple_iso(ts),
        }
    )


def with_solar_offset(snapshot: TzSnapshot, lng: float) -> TzSnapshot:
    return snapshot.model_copy(update={"solar_utc_offset": solar_offset_seconds(lng)})
