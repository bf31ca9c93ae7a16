# geocache/utils/datetime.py
from __future__ import annotations

import re
from datetime import UTC, datetime

# Julian day of the unix epoch (1970-01-01T00:00:00Z)
_JD_UNIX_EPOCH = 2440587.5
_SECONDS_PER_DAY = 86400

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def simple_iso(ts: int) -> str:
    """Render a unix timestamp as ``YYYY-MM-DDTHH:MM:SS`` (UTC, no zone designator)."""
    return datetime.fromtimestamp(ts, UTC).replace(tzinfo=None).isoformat(timespec="seconds")


def timestamp_from_string(value: str | None) -> int | None:
    """Parse a loose ISO-8601 date or datetime into unix seconds.

    Naive values are read as UTC. Returns None when the string is not a date.
    """
    if not value:
        return None
    text = value.strip().replace(" ", "T", 1)
    if _DATE_ONLY.match(text):
        text = f"{text}T00:00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        try:
            # "Z" を含む場合のフォールバック
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp())


def is_valid_date_string(value: str | None) -> bool:
    return timestamp_from_string(value) is not None


def unixtime_to_julian_day(ts: int | float) -> float:
    return ts / _SECONDS_PER_DAY + _JD_UNIX_EPOCH


def julian_day_to_unixtime(jd: float) -> int:
    return int(round((jd - _JD_UNIX_EPOCH) * _SECONDS_PER_DAY))
