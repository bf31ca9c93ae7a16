from .geo import (
    FakeClock,
    FakeProviders,
    InMemoryBackend,
    make_astro,
    make_place,
    make_tz,
    make_zone,
)

__all__ = [
    "FakeClock",
    "FakeProviders",
    "InMemoryBackend",
    "make_astro",
    "make_place",
    "make_tz",
    "make_zone",
]
