"""Numeric helpers shared by cache keys and upstream query strings."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int) -> Decimal:
    """Round ``value`` to ``places`` decimals, ties away from zero.

    Rounding works on the shortest decimal representation of the float
    (``repr``), so ``0.125`` rounds to ``0.13`` even though its binary value
    sits slightly below the tie. Negative zero collapses to zero.
    """

    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = rounded.copy_abs()
    return rounded


def fixed(value: float, places: int) -> str:
    """Round half-up and render with exactly ``places`` fractional digits."""

    return format(round_half_up(value, places), "f")


def plain_number(value: float) -> str:
    """Render a float without exponent notation or a redundant trailing ``.0``."""

    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


__all__ = ["fixed", "plain_number", "round_half_up"]
