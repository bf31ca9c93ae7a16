from __future__ import annotations

from geocache.services.cache_store import CacheStore

# ~6 months; postal codes without a resolvable address list rarely gain one
ADDRESS_CHECK_TTL_SECONDS = 183 * 24 * 60 * 60


class NegativeCheckRegistry:
    """Markers meaning "already attempted, do not retry the expensive lookup".

    Presence of a marker is independent of any positive cache entry; success is
    recorded by the positive entry itself, so only failures are marked.
    """

    def __init__(self, store: CacheStore, prefix: str = "address_check") -> None:
        self._store = store
        self._prefix = prefix

    @staticmethod
    def normalize(identity: str) -> str:
        return "_".join(identity.strip().upper().split())

    def key_for(self, identity: str) -> str:
        return f"{self._prefix}_{self.normalize(identity)}"

    async def has_been_checked(self, identity: str) -> bool:
        return await self._store.get(self.key_for(identity), int) is not None

    async def mark_checked(
        self, identity: str, ttl_seconds: int = ADDRESS_CHECK_TTL_SECONDS
    ) -> bool:
        return await self._store.set(self.key_for(identity), 1, ttl_seconds)
