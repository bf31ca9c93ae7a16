"""Lenient scalar extraction from loosely typed upstream JSON objects.

Upstream services send numbers as strings ("51.5"), booleans as 0/1 and omit
keys freely. These helpers never raise; they fall back to a default.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def as_float(row: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    value = row.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):  # noqa: UP038
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    # "NaN" and "inf" parse as floats but are never usable readings
    return number if math.isfinite(number) else default


def as_opt_int(row: Mapping[str, Any], key: str) -> int | None:
    value = row.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def as_int(row: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = as_opt_int(row, key)
    return default if value is None else value


def as_opt_str(row: Mapping[str, Any], key: str) -> str | None:
    value = row.get(key)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):  # noqa: UP038
        return str(value)
    return None


def as_str(row: Mapping[str, Any], key: str, default: str = "") -> str:
    value = as_opt_str(row, key)
    return default if value is None else value


def as_bool(row: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = row.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):  # noqa: UP038
        return value > 0
    return default


def as_mapping(row: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = row.get(key)
    return value if isinstance(value, Mapping) else None


def as_list(row: Mapping[str, Any], key: str) -> list[Any]:
    value = row.get(key)
    return list(value) if isinstance(value, list) else []


def as_floats(values: Any) -> list[float]:
    """Coerce a JSON array of numbers (or numeric strings) to floats, dropping junk."""

    if not isinstance(values, list):
        return []
    out: list[float] = []
    for item in values:
        if isinstance(item, bool):
            continue
        if isinstance(item, (int, float)):  # noqa: UP038
            number = float(item)
        elif isinstance(item, str):
            try:
                number = float(item)
            except ValueError:
                continue
        else:
            continue
        if math.isfinite(number):
            out.append(number)
    return out
