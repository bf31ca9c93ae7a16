from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from geocache.core.exceptions import InfrastructureError
from geocache.services.cache_store import CacheStore


class HealthService:
    def __init__(
        self,
        store: CacheStore,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self._store = store
        self._session_factory = session_factory

    async def _database_ok(self) -> bool:
        if self._session_factory is None:
            return True
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            return False
        return True

    async def ok(self) -> dict:
        if not await self._store.ping():
            raise InfrastructureError("cache backend unavailable")
        if not await self._database_ok():
            raise InfrastructureError("postal zone database unavailable")
        return {"ok": True}
