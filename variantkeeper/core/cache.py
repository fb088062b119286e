"""Variant listing cache for variantkeeper.

An explicit, injectable time-to-live cache for backend variant listings.
Callers own the instance and pass it to the views that share it, so tests
can build a fresh cache (or a frozen clock) instead of resetting process
state.

Typical usage::

    cache = VariantCache(ttl=60)
    variants = await cache.get_or_fetch("firefox", source.list_variants)
"""

from __future__ import annotations

import time
import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from variantkeeper.models.variant import Variant
from variantkeeper.utils.logger import get_logger
from variantkeeper.constants import DEFAULT_CACHE_TTL

logger = get_logger("cache")

Fetcher = Callable[[str], Awaitable[List[Variant]]]


def _key(name: str) -> str:
    return name.strip().lower()


class VariantCache:
    """Async-safe TTL cache keyed by package identity name.

    Args:
        ttl: Lifetime of an entry in seconds. ``0`` or less disables
            caching entirely.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, List[Variant]]] = {}
        self._lock: Optional[asyncio.Lock] = None

    @property
    def enabled(self) -> bool:
        return self.ttl > 0

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Synchronous accessors
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[List[Variant]]:
        """Return a fresh cached listing for *name*, or ``None``.

        Expired entries are evicted on access.
        """
        if not self.enabled:
            return None
        key = _key(name)
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, variants = entry
        if self._clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None
        return list(variants)

    def put(self, name: str, variants: List[Variant]) -> None:
        if not self.enabled:
            return
        self._entries[_key(name)] = (self._clock(), list(variants))

    def invalidate(self, name: str) -> bool:
        """Drop the entry for *name*. Returns True if one existed."""
        return self._entries.pop(_key(name), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Async fetch
    # ------------------------------------------------------------------

    async def get_or_fetch(self, name: str, fetch: Fetcher) -> List[Variant]:
        """Return the cached listing for *name*, fetching it on a miss.

        Double-checked under a lock so concurrent misses for the same name
        trigger a single fetch. Exceptions from *fetch* propagate and
        nothing is cached.
        """
        cached = self.get(name)
        if cached is not None:
            return cached

        if not self.enabled:
            return list(await fetch(name))

        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            # Another coroutine may have filled it while we waited
            cached = self.get(name)
            if cached is not None:
                return cached

            logger.debug("Cache miss for %s", name)
            variants = list(await fetch(name))
            self.put(name, variants)
            return list(variants)
