from __future__ import annotations

from collections import Counter

from redis.exceptions import ConnectionError as RedisConnectionError

from geocache.schemas.astro import AstroSnapshot, MoonData, SunData
from geocache.schemas.geo import Coordinate
from geocache.schemas.nearby import PointOfInterest, WeatherSnapshot, WikipediaSummary
from geocache.schemas.place import PlaceSnapshot
from geocache.schemas.postal import PcZone
from geocache.schemas.timezone import TzPeriod, TzSnapshot
from geocache.services.container import Providers

# 2023-11-14T22:13:20Z
DEFAULT_NOW = 1_700_000_000.0


class FakeClock:
    def __init__(self, start: float = DEFAULT_NOW) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryBackend:
    """Dict-backed stand-in for ``redis.asyncio.Redis`` with per-key expiry."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        self._clock = clock or FakeClock()
        self.data: dict[str, tuple[bytes, float | None]] = {}
        self.ttls: dict[str, int | None] = {}
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise RedisConnectionError("backend down")

    async def get(self, name: str) -> bytes | None:
        self._check()
        item = self.data.get(name)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self.data[name]
            return None
        return value

    async def set(self, name: str, value: bytes | str, ex: int | None = None) -> bool:
        self._check()
        if isinstance(value, str):
            value = value.encode()
        self.data[name] = (value, None if ex is None else self._clock() + ex)
        self.ttls[name] = ex
        return True

    async def ping(self) -> bool:
        self._check()
        return True


def make_place(**overrides) -> PlaceSnapshot:
    values = dict(
        lat=51.50853,
        lng=-0.12574,
        name="London",
        toponym="London",
        fcode="PPLC",
        distance=0.4,
        pop=8_961_989,
        admin_name="England",
        region="Greater London",
        cc="GB",
        country_name="United Kingdom",
        zone_name="Europe/London",
    )
    values.update(overrides)
    return PlaceSnapshot(**values)


def make_zone(pc: str = "WC2N 5DU", dist: float = 120.5, **overrides) -> PcZone:
    values = dict(
        pc=pc,
        lat=51.5076,
        lng=-0.1262,
        country="England",
        district="Westminster",
        ward="St James's",
        dist=dist,
    )
    values.update(overrides)
    return PcZone(**values)


def make_tz(**overrides) -> TzSnapshot:
    values = dict(
        abbreviation="GMT",
        country_code="GB",
        dst=False,
        gmt_offset=0,
        local_dt="2023-11-14T22:13:20",
        period=None,
        ref_unix=int(DEFAULT_NOW),
        utc="2023-11-14T22:13:20",
        week_day=2,
        zone_name="Europe/London",
    )
    values.update(overrides)
    return TzSnapshot(**values)


def make_astro(time: int = int(DEFAULT_NOW) - 1000) -> AstroSnapshot:
    return AstroSnapshot(
        start=time - 43_200,
        time=time,
        end=time + 43_200,
        interval_secs=21_600,
        sun=SunData(lng=232.1, positions=[231.6, 232.1, 232.6]),
        moon=MoonData(lng=250.3, positions=[244.0, 250.3, 256.7], phase=1),
    )


class FakeProviders:
    """One object implementing every upstream interface, counting calls per operation."""

    def __init__(self) -> None:
        self.place: PlaceSnapshot | None = make_place()
        self.timezone: TzSnapshot | None = make_tz()
        self.zones: list[PcZone] = [
            make_zone(),
            make_zone("WC2N 5DN", 240.0, lat=51.5079, lng=-0.1259),
        ]
        self.weather: WeatherSnapshot | None = WeatherSnapshot(
            lat=51.48, lng=-0.45, temperature=9.0, humidity=87, station_name="London / Heathrow"
        )
        self.pois: list[PointOfInterest] | None = [
            PointOfInterest(lat=51.508, lng=-0.128, name="Nelson's Column", type_name="monument")
        ]
        self.wiki: list[WikipediaSummary] | None = [
            WikipediaSummary(lat=51.508, lng=-0.128, title="Trafalgar Square", rank=100)
        ]
        self.astro: AstroSnapshot | None = make_astro()
        self.addresses: list[str] | None = ["Charing Cross Station, Strand, London WC2N 5DU"]
        self.calls: Counter[str] = Counter()
        self.errors: dict[str, Exception] = {}
        self.saved: dict[str, list[str]] = {}
        self.last_zone_name: str | None = None
        self.last_zone_query: tuple[float, int] | None = None

    def _record(self, name: str) -> None:
        self.calls[name] += 1
        if name in self.errors:
            raise self.errors[name]

    async def fetch_nearby(self, coord: Coordinate, date: str | None = None):
        self._record("place")
        return self.place

    async def fetch_timezone(self, coord: Coordinate, zone_name=None, date=None):
        self._record("timezone")
        self.last_zone_name = zone_name
        return self.timezone

    async def fetch_nearby_zones(self, coord: Coordinate, radius_km: float, limit: int):
        self._record("zones")
        self.last_zone_query = (radius_km, limit)
        return list(self.zones[:limit])

    async def fetch_zone(self, postal_code: str):
        self._record("zone")
        for zone in self.zones:
            if zone.pc == postal_code.strip().upper():
                return zone
        return None

    async def update_addresses(self, postal_code: str, addresses: list[str]) -> bool:
        self._record("save")
        self.saved[postal_code] = list(addresses)
        return True

    async def fetch_addresses(self, postal_code: str):
        self._record("addresses")
        return self.addresses

    async def fetch_weather(self, coord: Coordinate):
        self._record("weather")
        return self.weather

    async def fetch_pois(self, coord: Coordinate):
        self._record("poi")
        return self.pois

    async def fetch_wiki_summaries(self, coord: Coordinate):
        self._record("wiki")
        return self.wiki

    async def fetch_astro(self, coord: Coordinate, instant=None):
        self._record("astro")
        return self.astro

    def as_providers(self) -> Providers:
        return Providers(
            places=self,
            timezones=self,
            postal_zones=self,
            addresses=self,
            nearby=self,
            astro=self,
        )
