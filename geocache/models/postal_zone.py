"""Postal zone model (one row per postcode)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from geocache.models.base import Base


class PostalZone(Base):
    __tablename__ = "zones"

    pc: Mapped[str] = mapped_column(String(16), primary_key=True)
    addresses: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default="{}", default=list
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    altitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    northing: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    easting: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    country: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    county: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    district: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    ward_code: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    constituency: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    local_code: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    ward: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    grid_ref: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    modified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )
