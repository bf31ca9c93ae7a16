"""Remote address lookup by UK postcode."""

from __future__ import annotations

import random
import re
from collections.abc import Mapping
from pathlib import Path

import httpx
import structlog

from geocache.providers.http import request_json, require_mapping
from geocache.services.cache_store import CacheStore

logger = structlog.get_logger(__name__)

PROVIDER = "addresses"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/117.0.0.0 Safari/537.36"
)
USER_AGENTS_KEY = "user_agents"
# shorter lists are re-read from disk on every call
MIN_CACHED_USER_AGENTS = 6

_UK_POSTCODE = re.compile(
    r"^(GIR ?0AA|[A-PR-UWYZ](?:[0-9]{1,2}|[A-HK-Y][0-9]{1,2}|[0-9][A-HJKPSTUW]|[A-HK-Y][0-9][ABEHMNPRVWXY]) ?[0-9][ABD-HJLNP-UW-Z]{2})$"
)


def normalize_postcode(value: str) -> str:
    return " ".join(value.strip().upper().split())


def is_valid_uk_postcode(value: str) -> bool:
    return _UK_POSTCODE.match(normalize_postcode(value)) is not None


class UserAgentPool:
    """Random User-Agent strings read from a text file, one per line."""

    def __init__(self, store: CacheStore, file_name: str | None = None) -> None:
        self._store = store
        self._file_name = file_name

    def _read_file(self) -> list[str]:
        if not self._file_name:
            return []
        path = Path(self._file_name)
        if not path.exists():
            return []
        lines = path.read_text(encoding="utf-8").splitlines()
        return [line.strip() for line in lines if line.strip()]

    async def lines(self) -> list[str]:
        cached = await self._store.get(USER_AGENTS_KEY, list[str])
        if cached:
            return cached
        lines = self._read_file()
        if len(lines) >= MIN_CACHED_USER_AGENTS:
            await self._store.set(USER_AGENTS_KEY, lines)
        return lines

    async def pick(self) -> str:
        lines = await self.lines()
        if len(lines) > 1:
            return random.choice(lines)
        return DEFAULT_USER_AGENT


def _display_strings(payload: Mapping[str, object]) -> list[str]:
    items = payload.get("Data")
    if not isinstance(items, list):
        return []
    out: list[str] = []
    for item in items:
        if isinstance(item, Mapping) and isinstance(item.get("Display"), str):
            out.append(item["Display"])
    return out


class AddressLookupProvider:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        url: str,
        user_agents: UserAgentPool,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._url = url
        self._user_agents = user_agents
        self._timeout = timeout

    async def fetch_addresses(self, postal_code: str) -> list[str] | None:
        pc = normalize_postcode(postal_code)
        if not is_valid_uk_postcode(pc):
            logger.info("address_lookup_invalid_postcode", pc=pc)
            return None
        headers = {
            "User-Agent": await self._user_agents.pick(),
            "Content-Type": "application/json",
        }
        payload = await request_json(
            self._client,
            "POST",
            self._url,
            provider=PROVIDER,
            json={"Query": pc, "CountryIsoCode": "GBR"},
            headers=headers,
            timeout=self._timeout,
        )
        data = require_mapping(payload, PROVIDER, "Data")
        needle = pc.lower()
        return [line for line in _display_strings(data) if needle in line.lower()]
