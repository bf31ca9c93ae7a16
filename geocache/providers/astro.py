from __future__ import annotations

import httpx

from geocache.providers.http import request_json, require_mapping
from geocache.schemas.astro import AstroSnapshot
from geocache.schemas.geo import Coordinate
from geocache.utils.datetime import unixtime_to_julian_day

PROVIDER = "astro"


class AstroServiceProvider:
    """Sun, moon and ascendant ephemeris from the astro calculation service."""

    def __init__(self, client: httpx.AsyncClient, *, base_url: str, timeout: float = 10.0):
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def fetch_astro(
        self, coord: Coordinate, instant: int | None = None
    ) -> AstroSnapshot | None:
        params = {"loc": coord.to_query(), "full": "1", "bodies": "su,mo"}
        if instant is not None:
            params["jd"] = str(unixtime_to_julian_day(instant))
        payload = await request_json(
            self._client,
            "GET",
            f"{self._base_url}/ascendant",
            provider=PROVIDER,
            params=params,
            timeout=self._timeout,
        )
        return AstroSnapshot.from_upstream(require_mapping(payload, PROVIDER, "date", "values"))
