from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from geocache.core.exceptions import ValidationError
from geocache.utils.geo import plain_number

# Altitude sentinel meaning "not supplied"; readings inside the neutral band
# [0, DEFAULT_ALTITUDE] are not forwarded upstream.
DEFAULT_ALTITUDE = 10.0


class Coordinate(BaseModel):
    """Immutable request coordinate."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    alt: float = DEFAULT_ALTITUDE

    @classmethod
    def of(cls, lat: float, lng: float, alt: float | None = None) -> Coordinate:
        try:
            return cls(lat=lat, lng=lng, alt=DEFAULT_ALTITUDE if alt is None else alt)
        except PydanticValidationError as exc:
            raise ValidationError(f"invalid coordinate: {lat},{lng}") from exc

    @classmethod
    def parse(cls, loc: str | None) -> Coordinate:
        """Parse ``"lat,lng[,alt]"``; raises the domain ValidationError when unusable."""

        if not loc:
            raise ValidationError("loc is required")
        parts = [part.strip() for part in loc.split(",") if part.strip()]
        try:
            nums = [float(part) for part in parts]
        except ValueError as exc:
            raise ValidationError(f"invalid loc: {loc!r}") from exc
        if len(nums) < 2:
            raise ValidationError(f"invalid loc: {loc!r}")
        alt = nums[2] if len(nums) > 2 else None
        return cls.of(nums[0], nums[1], alt)

    @property
    def has_altitude(self) -> bool:
        return self.alt < 0.0 or self.alt > DEFAULT_ALTITUDE

    def to_query(self) -> str:
        """External ``lat,lng[,alt]`` form sent to upstream services."""

        text = f"{plain_number(self.lat)},{plain_number(self.lng)}"
        if self.has_altitude:
            text += f",{plain_number(round(self.alt))}"
        return text
