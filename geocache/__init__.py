"""Geo cache resolution service package."""

__all__ = []
