"""JSON cache store over a key-value backend (Redis in production).

The store is fail-open: a backend outage or an undecodable entry reads as a
miss and a failed write reports ``False``. Callers fall through to upstream.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol, TypeVar

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError, to_json
from redis.exceptions import RedisError

from geocache.core.exceptions import CacheBackendError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class KeyValueBackend(Protocol):
    """The subset of ``redis.asyncio.Redis`` the store relies on."""

    async def get(self, name: str) -> bytes | str | None: ...

    async def set(self, name: str, value: bytes | str, ex: int | None = None) -> Any: ...

    async def ping(self) -> Any: ...


@lru_cache(maxsize=64)
def _adapter(value_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(value_type)


class CacheStore:
    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    async def _read(self, key: str) -> bytes | str | None:
        try:
            return await self._backend.get(key)
        except (RedisError, OSError) as exc:
            raise CacheBackendError(str(exc)) from exc

    async def _write(self, key: str, payload: bytes, ttl_seconds: int) -> None:
        try:
            if ttl_seconds > 0:
                await self._backend.set(key, payload, ex=ttl_seconds)
            else:
                await self._backend.set(key, payload)
        except (RedisError, OSError) as exc:
            raise CacheBackendError(str(exc)) from exc

    async def get(self, key: str, value_type: type[T]) -> T | None:
        """Return the decoded entry for ``key`` or None on miss, outage or bad payload."""

        try:
            raw = await self._read(key)
        except CacheBackendError as exc:
            logger.warning("cache_backend_unavailable", op="get", key=key, error=str(exc))
            return None
        if raw is None:
            return None
        try:
            return _adapter(value_type).validate_json(raw)
        except PydanticValidationError:
            logger.warning("cache_entry_undecodable", key=key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int = 0) -> bool:
        """Serialize ``value`` as JSON and store it; ``ttl_seconds=0`` means no expiry."""

        try:
            payload = to_json(value, by_alias=True)
        except PydanticSerializationError as exc:
            logger.error("cache_entry_unserializable", key=key, error=str(exc))
            return False
        try:
            await self._write(key, payload, ttl_seconds)
        except CacheBackendError as exc:
            logger.warning("cache_backend_unavailable", op="set", key=key, error=str(exc))
            return False
        return True

    async def ping(self) -> bool:
        try:
            await self._backend.ping()
        except (RedisError, OSError) as exc:
            logger.warning("cache_backend_unavailable", op="ping", error=str(exc))
            return False
        return True
